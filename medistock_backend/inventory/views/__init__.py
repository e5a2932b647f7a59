from .medicine import MedicineViewSet

__all__ = [
    "MedicineViewSet",
]
