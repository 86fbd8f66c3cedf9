"""
核心类型定义

提供订单域使用的枚举和价格工具函数。枚举继承 (str, Enum)，
序列化时直接输出小写字符串（如 "medium"）。
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional


def round_price(value: float) -> float:
    """价格保留两位小数（四舍五入，远离零）"""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class DrinkSize(str, Enum):
    """杯型枚举"""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def price_multiplier(self) -> float:
        """杯型价格系数"""
        return _SIZE_MULTIPLIERS[self]

    @classmethod
    def values(cls) -> List[str]:
        return [s.value for s in cls]

    @classmethod
    def is_valid(cls, value) -> bool:
        """检查杯型字符串是否有效（区分大小写）"""
        return cls.try_from(value) is not None

    @classmethod
    def try_from(cls, value) -> Optional['DrinkSize']:
        """从字符串转换，无效时返回 None"""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


_SIZE_MULTIPLIERS = {
    DrinkSize.SMALL: 1.0,
    DrinkSize.MEDIUM: 1.3,
    DrinkSize.LARGE: 1.6,
}


class DrinkType(str, Enum):
    """饮品类别"""
    COFFEE = "coffee"
    TEA = "tea"

    @classmethod
    def values(cls) -> List[str]:
        return [t.value for t in cls]

    @classmethod
    def is_valid(cls, value) -> bool:
        return isinstance(value, str) and value in cls.values()


class OrderStatus(str, Enum):
    """订单状态枚举

    不限制状态流转，任意状态之间都可以互相切换。
    """
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> List[str]:
        return [s.value for s in cls]

    @classmethod
    def is_valid(cls, value) -> bool:
        return cls.try_from(value) is not None

    @classmethod
    def try_from(cls, value) -> Optional['OrderStatus']:
        """从字符串转换，无效时返回 None"""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class ValidationErrorType(str, Enum):
    """验证错误分类，用于映射 HTTP 状态码"""
    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    BUSINESS_RULE = "business_rule"

    @property
    def http_status(self) -> int:
        return _ERROR_TYPE_STATUS[self]


_ERROR_TYPE_STATUS = {
    ValidationErrorType.NOT_FOUND: 404,
    ValidationErrorType.INVALID_INPUT: 422,
    ValidationErrorType.BUSINESS_RULE: 422,
}


# 默认值
DEFAULT_QUANTITY = 1
MIN_QUANTITY = 1
MAX_QUANTITY = 10

# SQLite INTEGER 上限，超出的 ID 无法绑定为查询参数
MAX_DB_INTEGER = 2 ** 63 - 1
