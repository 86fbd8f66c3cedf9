"""数据模型模块"""

from .drink import Drink
from .order import OrderItem, Order

__all__ = [
    "Drink",
    "OrderItem",
    "Order",
]
