# catalog/models/__init__.py
from catalog.models.product import Product

__all__ = ["Product"]
