"""
统一异常定义模块

基础设施与 HTTP 边界使用的异常体系。业务校验失败不走异常，
而是通过 services.validation.ValidationResult 返回。
"""

from typing import Optional, Dict, Any


class APIError(Exception):
    """API相关异常基类"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式，用于API响应"""
        data = {
            "error": True,
            "message": self.message,
        }
        if self.details:
            data["errors"] = self.details
        return data


# ============ 请求错误 ============

class UnprocessableEntityError(APIError):
    """请求内容校验失败 (HTTP 422)"""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, status_code=422, details=details)


class NotFoundError(APIError):
    """资源不存在错误 (HTTP 404)"""

    def __init__(
        self,
        message: str = "Resource not found",
        resource: Optional[str] = None
    ):
        super().__init__(
            message=message,
            status_code=404,
            details={"resource": resource} if resource else {}
        )


# ============ 业务错误 ============

class OrderError(APIError):
    """订单相关错误"""
    pass


class OrderNotFoundError(OrderError):
    """订单不存在"""

    def __init__(self, order_id: int):
        super().__init__(
            message=f"Order with ID {order_id} not found",
            status_code=404
        )
        self.order_id = order_id


class DrinkNotFoundError(APIError):
    """饮品不存在"""

    def __init__(self, drink_id: int):
        super().__init__(
            message=f"Drink with ID {drink_id} not found",
            status_code=404
        )
        self.drink_id = drink_id


# ============ 数据库错误 ============

class DatabaseError(APIError):
    """数据库相关错误"""
    pass


class DatabaseConnectionError(DatabaseError):
    """数据库连接错误"""

    def __init__(self, message: str = "数据库连接失败"):
        super().__init__(message=message, status_code=503)


class DatabaseQueryError(DatabaseError):
    """数据库查询错误"""

    def __init__(self, message: str = "数据库查询失败"):
        super().__init__(message=message, status_code=500)
