# Export all DAO classes
from .base_dao import BaseDAO
from .product_dao import product_dao
from .purchase_list_dao import purchase_list_dao

__all__ = [
    "BaseDAO",
    "product_dao",
    "purchase_list_dao",
]
