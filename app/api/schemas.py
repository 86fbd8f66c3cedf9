"""API 请求模型

字段在解析阶段全部可选，缺失字段的报告和业务校验由路由和服务层完成。
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

REQUIRED_ORDER_FIELDS = ["customer_name", "items"]


class CreateOrderRequest(BaseModel):
    """创建订单请求

    items 保持原始结构（每项含 drink_id / size / quantity / cup_text），
    逐项校验由 OrderService 完成。
    """
    model_config = ConfigDict(extra="ignore")

    customer_name: Optional[str] = Field(default=None, max_length=255, description="顾客姓名")
    items: Optional[Any] = Field(default=None, description="订单项列表")
    notes: Optional[str] = Field(default=None, description="订单备注")


class UpdateOrderRequest(BaseModel):
    """更新订单请求（所有字段可选）"""
    model_config = ConfigDict(extra="ignore")

    customer_name: Optional[str] = Field(default=None, max_length=255, description="顾客姓名")
    status: Optional[str] = Field(default=None, description="订单状态")
    notes: Optional[str] = Field(default=None, description="订单备注，显式传 null 会清空")

    def to_patch(self) -> Dict[str, Any]:
        """只包含请求中出现过的字段（区分未传和传 null）"""
        return self.model_dump(exclude_unset=True)
