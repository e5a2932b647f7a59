from .sale import SaleLineSerializer, SaleSerializer

__all__ = ["SaleLineSerializer", "SaleSerializer"]
