"""
Modelo de Perfil de Comprador

Resultado de la pre-calificación del comprador: monto máximo con el que
se lo compara y un score normalizado de preparación crediticia.
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from propready.models.listing import parse_amount


class BuyerProfile(BaseModel):
    """
    Perfil de pre-calificación.

    Un monto en 0 significa que no hay pre-calificación cargada y el
    scoring queda deshabilitado.
    """

    model_config = ConfigDict(frozen=True)

    qualified_amount: float = Field(
        0.0, ge=0, description="Monto máximo pre-calificado (0 = sin calificación)"
    )
    qualification_score: float = Field(
        0.0, description="Score de preparación normalizado, nominalmente 0-100"
    )

    @field_validator("qualified_amount", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> float:
        amount = parse_amount(value)
        if amount is None or amount < 0:
            return 0.0
        return amount

    @field_validator("qualification_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> float:
        score = parse_amount(value)
        return 0.0 if score is None else score

    @property
    def has_qualification(self) -> bool:
        return self.qualified_amount > 0

    @classmethod
    def from_quiz_result(
        cls, record: Optional[Mapping[str, Any]]
    ) -> "BuyerProfile":
        """
        Construye el perfil desde el resultado del quiz de pre-calificación.

        Acepta las claves del quiz ('preQualAmount', 'score') o los nombres
        de campo del modelo. Sin resultado devuelve un perfil vacío.
        """
        if not record:
            return cls()

        amount = record.get("preQualAmount", record.get("qualified_amount"))
        score = record.get("score", record.get("qualification_score"))

        return cls(qualified_amount=amount, qualification_score=score)
