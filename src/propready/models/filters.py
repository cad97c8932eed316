"""
Filtros de búsqueda ingresados por el usuario.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from propready.models.listing import parse_amount


class SearchFilters(BaseModel):
    """
    Filtros opcionales del buscador.

    category puede ser una categoría con nombre ('houses', 'under-1m')
    o un texto libre comparado contra la categoría del listing.
    """

    category: Optional[str] = Field(None, description="Categoría seleccionada")
    free_text: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("free_text", "freeText", "query"),
        description="Texto de búsqueda",
    )
    max_price: Optional[float] = Field(
        None,
        validation_alias=AliasChoices("max_price", "maxPrice"),
        description="Precio máximo",
    )

    @field_validator("category", "free_text", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip().lower()
        return text or None

    @field_validator("max_price", mode="before")
    @classmethod
    def _coerce_max_price(cls, value: Any) -> Optional[float]:
        return parse_amount(value)

    @property
    def is_empty(self) -> bool:
        return not (self.category or self.free_text or self.max_price is not None)
