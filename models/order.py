"""订单数据模型"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from core.types import DrinkSize, OrderStatus, MIN_QUANTITY, MAX_QUANTITY, round_price
from .drink import format_timestamp, parse_timestamp


@dataclass(frozen=True)
class OrderItem:
    """订单项（不可变快照）

    price 是下单时解析出的单价（基础价 × 杯型系数），之后不再重新计算。
    drink_name 仅在通过数据库联表加载时存在。
    """
    drink_id: int
    size: DrinkSize
    price: float
    quantity: int = 1
    cup_text: Optional[str] = None
    order_id: Optional[int] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    drink_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "size", DrinkSize(self.size))
        if not MIN_QUANTITY <= self.quantity <= MAX_QUANTITY:
            raise ValueError(f"数量必须在 {MIN_QUANTITY} 到 {MAX_QUANTITY} 之间: {self.quantity}")

    @property
    def subtotal(self) -> float:
        return round_price(self.price * self.quantity)

    def with_order_id(self, order_id: int) -> "OrderItem":
        """返回绑定到订单的副本"""
        return replace(self, order_id=order_id)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "drink_id": self.drink_id,
            "size": self.size.value,
            "quantity": self.quantity,
            "cup_text": self.cup_text,
            "price": self.price,
            "subtotal": self.subtotal,
        }
        if self.drink_name is not None:
            data["drink_name"] = self.drink_name
        return data

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "OrderItem":
        return cls(
            drink_id=int(row["drink_id"]),
            size=row["size"],
            price=float(row["price"]),
            quantity=int(row.get("quantity") or 1),
            cup_text=row.get("cup_text"),
            order_id=int(row["order_id"]) if row.get("order_id") is not None else None,
            id=int(row["id"]) if row.get("id") is not None else None,
            created_at=parse_timestamp(row.get("created_at")),
            drink_name=row.get("drink_name"),
        )


@dataclass
class Order:
    """订单（聚合根）

    总价始终由订单项推导，不单独存储。
    """
    customer_name: str
    status: OrderStatus = OrderStatus.PENDING
    notes: Optional[str] = None
    items: List[OrderItem] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.set_status(self.status)
        self.items = list(self.items)

    @staticmethod
    def is_valid_status(status: Any) -> bool:
        return OrderStatus.is_valid(status)

    def set_status(self, status: Union[OrderStatus, str]):
        """设置状态

        Raises:
            ValueError: 状态值无效（内部调用错误，而非用户输入错误）
        """
        parsed = OrderStatus.try_from(status)
        if parsed is None:
            raise ValueError(f"Invalid status: {status}")
        self.status = parsed

    def add_item(self, item: OrderItem):
        self.items.append(item)

    def get_total(self) -> float:
        return round_price(sum(item.price * item.quantity for item in self.items))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "customer_name": self.customer_name,
            "status": self.status.value,
            "notes": self.notes,
            "items": [item.to_dict() for item in self.items],
            "total": self.get_total(),
            "created_at": format_timestamp(self.created_at),
            "updated_at": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_row(cls, row: Dict[str, Any], items: Optional[List[OrderItem]] = None) -> "Order":
        return cls(
            customer_name=row["customer_name"],
            status=row.get("status") or OrderStatus.PENDING,
            notes=row.get("notes"),
            items=items or [],
            id=int(row["id"]) if row.get("id") is not None else None,
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )
