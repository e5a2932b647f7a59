# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS
"""

from .sale import ImmutableRecordError, Sale
from .sale_line import SaleLine

__all__ = [
    "ImmutableRecordError",
    "Sale",
    "SaleLine",
]
