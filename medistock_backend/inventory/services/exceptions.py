# inventory/services/exceptions.py

"""
INVENTORY SERVICE ERRORS

Centralized domain errors for the stock catalog.

Input validation failures use django.core.exceptions.ValidationError so
model.clean() and the catalog report bad input the same way.
"""


class CatalogError(Exception):
    """Base exception for all stock catalog failures."""


class NotFound(LookupError):
    """Raised when an operation references a record that does not exist."""


class MedicineNotFound(NotFound, CatalogError):
    def __init__(self, medicine_id):
        self.medicine_id = medicine_id
        super().__init__(f"Medicine {medicine_id} not found")


class InsufficientStock(CatalogError):
    """
    Raised when a conditional decrement cannot be satisfied.

    Retryable: the operator re-attempts against refreshed stock.
    """

    def __init__(self, *, medicine_id, name: str, requested: int, available: int):
        self.medicine_id = medicine_id
        self.name = name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {name}. "
            f"Requested: {requested}, Available: {available}"
        )
