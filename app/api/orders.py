"""订单 API"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from core.validators import clamp_pagination, find_missing_fields, parse_id_param
from infrastructure.container import Container
from infrastructure.exceptions import OrderNotFoundError, UnprocessableEntityError
from services import OrderService, ValidationResult
from .deps import get_container, get_order_service, validation_error_response
from .schemas import CreateOrderRequest, UpdateOrderRequest, REQUIRED_ORDER_FIELDS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


def _require_id(value: str) -> int:
    parsed = parse_id_param(value)
    if parsed is None:
        raise UnprocessableEntityError("Invalid ID provided")
    return parsed


def _query_int(value: Optional[str]) -> Optional[int]:
    """宽松解析查询参数，无法解析时按未传处理"""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@router.get("")
def list_orders(
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    container: Container = Depends(get_container),
    order_service: OrderService = Depends(get_order_service)
):
    """分页获取订单（limit 限制在 1-100，offset 不小于 0）"""
    pagination = container.get('settings').pagination
    limit_value, offset_value = clamp_pagination(
        _query_int(limit),
        _query_int(offset),
        max_limit=pagination.max_limit,
        default_limit=pagination.default_limit
    )
    page = order_service.get_all_orders(limit_value, offset_value)
    return page.to_dict()


@router.post("", status_code=201)
def create_order(
    body: CreateOrderRequest,
    order_service: OrderService = Depends(get_order_service)
):
    """创建订单"""
    missing = find_missing_fields(body.model_dump(), REQUIRED_ORDER_FIELDS)
    if missing:
        raise UnprocessableEntityError("Missing required fields", {"missing_fields": missing})

    if not isinstance(body.items, list):
        raise UnprocessableEntityError("Items must be an array")

    result = order_service.create_order(
        customer_name=body.customer_name,
        items=body.items,
        notes=body.notes
    )
    if isinstance(result, ValidationResult):
        return validation_error_response(result)

    return JSONResponse(
        status_code=201,
        content={"data": result.to_dict()},
        headers={"Location": f"/api/v1/orders/{result.id}"}
    )


@router.get("/{order_id}")
def get_order(order_id: str, order_service: OrderService = Depends(get_order_service)):
    """获取单个订单"""
    parsed_id = _require_id(order_id)
    order = order_service.get_order_by_id(parsed_id)
    if order is None:
        raise OrderNotFoundError(parsed_id)
    return {"data": order.to_dict()}


@router.put("/{order_id}")
def update_order(
    order_id: str,
    body: UpdateOrderRequest,
    order_service: OrderService = Depends(get_order_service)
):
    """更新订单（顾客姓名、状态、备注）"""
    parsed_id = _require_id(order_id)
    result = order_service.update_order(parsed_id, body.to_patch())
    if isinstance(result, ValidationResult):
        return validation_error_response(result)
    return {"data": result.to_dict()}


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: str, order_service: OrderService = Depends(get_order_service)):
    """删除订单"""
    parsed_id = _require_id(order_id)
    if not order_service.delete_order(parsed_id):
        raise OrderNotFoundError(parsed_id)
    return Response(status_code=204)
