"""业务服务模块"""

from .validation import ValidationResult
from .drink_service import DrinkService
from .order_service import OrderService, OrderPage

__all__ = [
    "ValidationResult",
    "DrinkService",
    "OrderService",
    "OrderPage",
]
