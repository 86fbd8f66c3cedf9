"""订单服务

负责订单创建、更新、删除的校验流程，持久化委托给 OrderStore。
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from core.interfaces import OrderStore
from core.types import (
    DrinkSize, OrderStatus, DEFAULT_QUANTITY, MIN_QUANTITY, MAX_QUANTITY, MAX_DB_INTEGER
)
from models.order import Order, OrderItem
from .drink_service import DrinkService
from .validation import ValidationResult

logger = logging.getLogger(__name__)


@dataclass
class OrderPage:
    """分页查询结果"""
    orders: List[Order] = field(default_factory=list)
    total: int = 0
    limit: int = 50
    offset: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": [order.to_dict() for order in self.orders],
            "meta": {
                "total": self.total,
                "limit": self.limit,
                "offset": self.offset,
            },
        }


def _to_int(value: Any) -> Optional[int]:
    """宽松整数转换，无法转换或超出数据库整数范围时返回 None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        parsed = int(value)
    elif isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    if abs(parsed) > MAX_DB_INTEGER:
        return None
    return parsed


class OrderService:
    """订单服务"""

    def __init__(self, order_store: OrderStore, drink_service: DrinkService):
        self.order_store = order_store
        self.drink_service = drink_service

    # ==================== 查询 ====================

    def get_all_orders(self, limit: int = 50, offset: int = 0) -> OrderPage:
        """分页获取订单

        limit/offset 的范围裁剪由调用方（HTTP 边界）负责。
        """
        return OrderPage(
            orders=self.order_store.find_all(limit, offset),
            total=self.order_store.count(),
            limit=limit,
            offset=offset,
        )

    def get_order_by_id(self, order_id: int) -> Optional[Order]:
        return self.order_store.find_by_id(order_id)

    # ==================== 创建 ====================

    def create_order(
        self,
        customer_name: str,
        items: Sequence[Mapping[str, Any]],
        notes: Optional[str] = None
    ) -> Union[Order, ValidationResult]:
        """创建订单

        Args:
            customer_name: 顾客姓名
            items: 原始订单项列表，每项包含 drink_id / size / quantity / cup_text
            notes: 订单备注

        Returns:
            成功时返回持久化后重新加载的订单；任一校验失败返回 ValidationResult，
            此时不会写入任何数据。
        """
        if not (customer_name or "").strip():
            return ValidationResult.failure("Customer name is required")

        if not items:
            return ValidationResult.failure("Order must contain at least one item")

        order = Order(customer_name=customer_name, status=OrderStatus.PENDING, notes=notes)

        # 按输入顺序逐项校验，第一个失败项直接返回
        for index, item_data in enumerate(items):
            result = self._validate_and_create_item(item_data, index)
            if isinstance(result, ValidationResult):
                logger.debug(f"订单校验失败: {result.error}")
                return result
            order.add_item(result)

        saved = self.order_store.save(order)
        logger.info(f"创建订单: id={saved.id}, items={len(saved.items)}, total={saved.get_total()}")
        return saved

    def _validate_and_create_item(
        self,
        data: Mapping[str, Any],
        index: int
    ) -> Union[OrderItem, ValidationResult]:
        """校验单个订单项并构建 OrderItem"""
        if not isinstance(data, Mapping):
            return ValidationResult.failure(f"Item {index}: must be an object")

        if data.get("drink_id") is None:
            return ValidationResult.failure(f"Item {index}: drink_id is required")

        if data.get("size") is None:
            return ValidationResult.failure(f"Item {index}: size is required")

        drink_id = _to_int(data["drink_id"])
        if drink_id is None:
            return ValidationResult.failure(f"Item {index}: drink_id must be an integer")

        size_value = data["size"]
        size = DrinkSize.try_from(size_value)
        if size is None:
            valid_sizes = ", ".join(DrinkSize.values())
            return ValidationResult.failure(
                f"Item {index}: Invalid size '{size_value}'. Valid sizes: {valid_sizes}"
            )

        raw_quantity = data.get("quantity")
        quantity = DEFAULT_QUANTITY if raw_quantity is None else _to_int(raw_quantity)
        if quantity is None or not MIN_QUANTITY <= quantity <= MAX_QUANTITY:
            return ValidationResult.failure(
                f"Item {index}: Quantity must be between {MIN_QUANTITY} and {MAX_QUANTITY}"
            )

        cup_text = data.get("cup_text")
        if cup_text is not None and not isinstance(cup_text, str):
            return ValidationResult.failure(f"Item {index}: cup_text must be a string")

        # 引用的饮品不存在属于请求体错误（422），而非资源不存在（404）
        size_validation = self.drink_service.validate_drink_size(drink_id, size.value)
        if not size_validation.is_valid:
            return ValidationResult.failure(f"Item {index}: {size_validation.error}")

        price = self.drink_service.get_drink_price(drink_id, size.value)
        if price is None:
            return ValidationResult.failure(f"Item {index}: Unable to calculate price")

        return OrderItem(
            drink_id=drink_id,
            size=size,
            price=price,
            quantity=quantity,
            cup_text=cup_text,
        )

    # ==================== 更新 / 删除 ====================

    def update_order(self, order_id: int, patch: Mapping[str, Any]) -> Union[Order, ValidationResult]:
        """更新订单（顾客姓名、状态、备注）

        patch 中不存在的键保持不变；notes 键只要存在（包括 None）就覆盖。
        状态不限制流转方向。
        """
        order = self.order_store.find_by_id(order_id)
        if order is None:
            return ValidationResult.not_found(f"Order with ID {order_id} not found")

        if patch.get("customer_name") is not None:
            customer_name = str(patch["customer_name"]).strip()
            if not customer_name:
                return ValidationResult.failure("Customer name cannot be empty")
            order.customer_name = customer_name

        if patch.get("status") is not None:
            status = OrderStatus.try_from(patch["status"])
            if status is None:
                valid_statuses = ", ".join(OrderStatus.values())
                return ValidationResult.failure(f"Invalid status. Valid statuses: {valid_statuses}")
            order.set_status(status)

        if "notes" in patch:
            order.notes = patch["notes"]

        updated = self.order_store.update(order)
        logger.info(f"更新订单: id={order_id}, status={updated.status.value}")
        return updated

    def delete_order(self, order_id: int) -> bool:
        deleted = self.order_store.delete(order_id)
        if deleted:
            logger.info(f"删除订单: id={order_id}")
        return deleted
