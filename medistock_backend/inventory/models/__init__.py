"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .medicine import Medicine

__all__ = [
    "Medicine",
]
