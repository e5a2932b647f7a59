from .catalog import StockCatalog, filter_medicines
from .exceptions import CatalogError, InsufficientStock, MedicineNotFound, NotFound

__all__ = [
    "StockCatalog",
    "filter_medicines",
    "CatalogError",
    "InsufficientStock",
    "MedicineNotFound",
    "NotFound",
]
