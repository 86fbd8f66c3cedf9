"""API 模块"""

from .schemas import CreateOrderRequest, UpdateOrderRequest
from .drinks import router as drinks_router
from .orders import router as orders_router

__all__ = [
    "CreateOrderRequest",
    "UpdateOrderRequest",
    "drinks_router",
    "orders_router",
]
