from catalog_api.models.category import Category
from catalog_api.models.product import Product

__all__ = [
    "Category",
    "Product",
]
