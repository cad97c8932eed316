"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> propready/ -> src/ -> project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

# Ventanas de tolerancia de precio (fracción del monto pre-calificado)
SEARCH_TOLERANCE = 0.30
DASHBOARD_TOLERANCE = 0.40


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Matching
    search_tolerance: float = Field(
        SEARCH_TOLERANCE,
        gt=0.0,
        le=1.0,
        description="Tolerancia K usada en búsqueda/listado",
    )
    dashboard_tolerance: float = Field(
        DASHBOARD_TOLERANCE,
        gt=0.0,
        le=1.0,
        description="Tolerancia K usada en propiedades sugeridas del dashboard",
    )

    # Sugerencias
    suggestion_count: int = Field(
        3, ge=1, le=20, description="Cantidad de propiedades sugeridas a generar"
    )

    # Filtros
    price_ceiling_filter: float = Field(
        1_000_000.0, gt=0.0, description="Techo de precio de la categoría 'under-1m'"
    )

    # Estimación de cuota mensual
    repayment_annual_rate: float = Field(
        0.10, ge=0.0, le=1.0, description="Tasa anual usada para estimar la cuota"
    )
    repayment_years: int = Field(
        20, ge=1, le=40, description="Plazo en años para estimar la cuota"
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema

# Categorías con nombre del buscador. None = numérica (techo de precio).
CATEGORY_FILTERS: dict[str, Optional[tuple[str, ...]]] = {
    "houses": ("house",),
    "apartments": ("apartment",),
    "townhouses": ("townhouse",),
    "vacant-land": ("vacant", "land"),
    "commercial": ("commercial",),
    "under-1m": None,
}

ALL_CATEGORIES = "all"

SUGGESTION_PROPERTY_TYPES = ["Apartment", "Townhouse", "House", "Duplex"]

SUGGESTION_LOCATIONS = [
    "iKhayalami, Johannesburg",
    "Sandton, Johannesburg",
    "Rosebank, Johannesburg",
    "Fourways, Johannesburg",
    "Randburg, Johannesburg",
]
