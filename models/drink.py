"""饮品数据模型"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Tuple

from core.types import DrinkSize, DrinkType, round_price


def parse_timestamp(value: Any) -> Optional[datetime]:
    """解析数据库中的时间戳字段"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class Drink:
    """饮品（目录项，不可变）

    包含杯型限制和按杯型计价规则。
    """
    name: str
    slug: str
    type: DrinkType
    base_price: float
    has_milk: bool
    allowed_sizes: Tuple[str, ...]
    components: Tuple[str, ...] = field(default_factory=tuple)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        # frozen dataclass 需要通过 object.__setattr__ 规范化字段
        object.__setattr__(self, "type", DrinkType(self.type))
        object.__setattr__(self, "allowed_sizes", tuple(self.allowed_sizes))
        object.__setattr__(self, "components", tuple(self.components))
        if not self.allowed_sizes:
            raise ValueError(f"饮品 '{self.slug}' 至少需要一个可选杯型")
        if self.base_price < 0:
            raise ValueError(f"饮品 '{self.slug}' 的基础价格不能为负数")

    def is_size_allowed(self, size: str) -> bool:
        """检查杯型是否可选（精确匹配，区分大小写）"""
        if isinstance(size, DrinkSize):
            size = size.value
        return size in self.allowed_sizes

    def get_price_for_size(self, size: str) -> float:
        """计算指定杯型的价格

        未知杯型按系数 1.0 计算；下单流程会在此之前完成杯型校验。
        """
        drink_size = DrinkSize.try_from(size)
        multiplier = drink_size.price_multiplier if drink_size else 1.0
        return round_price(self.base_price * multiplier)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "type": self.type.value,
            "base_price": self.base_price,
            "has_milk": self.has_milk,
            "allowed_sizes": list(self.allowed_sizes),
            "components": list(self.components),
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Drink":
        allowed_sizes = row.get("allowed_sizes") or "[]"
        components = row.get("components") or "[]"
        return cls(
            name=row["name"],
            slug=row["slug"],
            type=row["type"],
            base_price=float(row["base_price"]),
            has_milk=bool(row["has_milk"]),
            allowed_sizes=_decode_list(allowed_sizes),
            components=_decode_list(components),
            id=int(row["id"]) if row.get("id") is not None else None,
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )


def _decode_list(value: Any) -> Sequence[str]:
    if isinstance(value, str):
        return json.loads(value)
    return value
