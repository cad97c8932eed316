"""
Modelo de Listing

Propiedad publicada tal como la entrega el repositorio de inventario.
El motor de matching sólo usa precio, categoría y los campos de texto;
el resto viaja como atributos opacos para la capa de presentación.
"""

import math
import re
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_NON_NUMERIC = re.compile(r"[^0-9.,\-]")
_DECIMAL_COMMA = re.compile(r",\d{1,2}$")
_DOT_THOUSANDS = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def _normalize_separators(text: str) -> str:
    if _DECIMAL_COMMA.search(text):
        # "1 500 000,50" / "1.500.000,50": coma decimal
        whole, _, cents = text.rpartition(",")
        return whole.replace(".", "").replace(",", "") + "." + cents

    text = text.replace(",", "")
    if _DOT_THOUSANDS.match(text):
        return text.replace(".", "")
    return text


def parse_amount(value: Any) -> Optional[float]:
    """
    Convierte un monto crudo a float.

    Acepta números o strings con símbolo de moneda y separadores de miles
    ("R 1,500,000", "1 500 000", "1.500.000"). Una coma seguida de uno o
    dos dígitos al final se toma como separador decimal ("1 500 000,50").
    Devuelve None si no es interpretable o no es finito.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        cleaned = _normalize_separators(_NON_NUMERIC.sub("", value))
        if not cleaned:
            return None
        value = cleaned

    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(amount):
        return None
    return amount


class Listing(BaseModel):
    """
    Propiedad candidata para matching.

    Inmutable: el motor nunca modifica un Listing recibido.
    """

    model_config = ConfigDict(frozen=True)

    # Identificación
    id: str = Field(..., description="ID único y estable del listing")

    # Precio (None = dato faltante o inválido, no matcheable)
    price: Optional[float] = Field(None, description="Precio publicado")

    # Texto
    category: str = Field(default="", description="Tipo: house, apartment, townhouse...")
    title: str = Field(default="", description="Título del anuncio")
    address: str = Field(default="", description="Dirección o zona")

    # Datos descriptivos opacos (dormitorios, baños, superficie, imágenes...)
    attributes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _coerce_price(cls, value: Any) -> Optional[float]:
        return parse_amount(value)

    @field_validator("category", "title", "address", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @property
    def is_priced(self) -> bool:
        """True si el precio permite calcular un score."""
        return self.price is not None and self.price > 0

    @property
    def searchable_text(self) -> list[str]:
        """Campos usados por la búsqueda de texto libre."""
        return [self.title, self.address, self.category]

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Listing":
        """
        Construye un Listing desde un registro crudo del repositorio.

        Acepta 'type' como alias de 'category'. Las claves no reconocidas
        se guardan en attributes.
        """
        known = {"id", "price", "category", "type", "title", "address", "attributes"}

        extra = record.get("attributes")
        attributes = dict(extra) if isinstance(extra, Mapping) else {}
        attributes.update({k: v for k, v in record.items() if k not in known})
        for key in known:
            attributes.pop(key, None)

        category = record.get("category")
        if category is None:
            category = record.get("type")

        return cls(
            id=record.get("id"),
            price=record.get("price"),
            category=category,
            title=record.get("title"),
            address=record.get("address"),
            attributes=attributes,
        )

    def to_dict(self) -> dict:
        """Convierte a diccionario plano para la capa de presentación."""
        # Los campos del modelo prevalecen sobre atributos homónimos
        data = dict(self.attributes)
        data.update(self.model_dump(exclude={"attributes"}))
        return data
