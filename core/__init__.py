"""
核心模块

提供存储抽象接口和类型定义，解决循环依赖问题。
"""

from .interfaces import (
    DrinkCatalog,
    OrderStore,
)
from .types import (
    DrinkSize,
    DrinkType,
    OrderStatus,
    ValidationErrorType,
    round_price,
)

__all__ = [
    # 接口
    "DrinkCatalog",
    "OrderStore",
    # 类型
    "DrinkSize",
    "DrinkType",
    "OrderStatus",
    "ValidationErrorType",
    "round_price",
]
