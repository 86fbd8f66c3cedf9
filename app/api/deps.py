"""路由依赖：从应用容器中取出服务"""

from fastapi import Depends, Request
from fastapi.responses import JSONResponse

from infrastructure.container import Container
from services import DrinkService, OrderService, ValidationResult


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_drink_service(container: Container = Depends(get_container)) -> DrinkService:
    return container.get('drink_service')


def get_order_service(container: Container = Depends(get_container)) -> OrderService:
    return container.get('order_service')


def validation_error_response(result: ValidationResult) -> JSONResponse:
    """将 ValidationResult 转换为错误响应（404 / 422）"""
    return JSONResponse(
        status_code=result.http_status,
        content={"error": True, "message": result.error}
    )
