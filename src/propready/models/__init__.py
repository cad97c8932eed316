"""
Modelos de datos del sistema.

- BuyerProfile: pre-calificación del comprador
- Listing: propiedad del inventario
- SearchFilters: filtros del buscador
"""

from propready.models.listing import Listing, parse_amount
from propready.models.profile import BuyerProfile
from propready.models.filters import SearchFilters

__all__ = [
    "BuyerProfile",
    "Listing",
    "SearchFilters",
    "parse_amount",
]
