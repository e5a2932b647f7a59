from .medicine import MedicineSerializer, MedicineWriteSerializer

__all__ = [
    "MedicineSerializer",
    "MedicineWriteSerializer",
]
