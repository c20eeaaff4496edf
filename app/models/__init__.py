# Import all models for easy access
from .product import Product, ProductCreate, ProductRead, ProductUpdate
from .purchase_list import PurchaseList

__all__ = [
    "Product", "ProductCreate", "ProductRead", "ProductUpdate",
    "PurchaseList",
]
