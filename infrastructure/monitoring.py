"""
监控和结构化日志模块

JSON 行日志、凭证脱敏、请求 ID 追踪，以及记录每个 HTTP 请求的中间件。
"""

import re
import sys
import time
import json
import uuid
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


# ==================== 请求追踪 ====================

def get_request_id() -> Optional[str]:
    """获取当前请求 ID"""
    return _request_id.get()


def set_request_id(request_id: Optional[str]):
    _request_id.set(request_id)


def generate_request_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def request_context(request_id: Optional[str] = None):
    """在上下文内绑定请求 ID，退出时恢复"""
    rid = request_id or generate_request_id()
    token = _request_id.set(rid)
    try:
        yield rid
    finally:
        _request_id.reset(token)


# ==================== 格式化与过滤 ====================

class StructuredFormatter(logging.Formatter):
    """每条日志输出为一行 JSON

    固定字段: timestamp / level / logger / message / service / source，
    可选字段: request_id / data（事件字段）/ exception。
    """

    def __init__(self, service_name: str = "coffee-shop-api"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "source": f"{record.filename}:{record.lineno}",
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            entry["request_id"] = request_id

        fields = getattr(record, "extra_data", None)
        if fields:
            entry["data"] = fields

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, ensure_ascii=False, default=str)


class SensitiveDataFilter(logging.Filter):
    """屏蔽日志消息中的凭证值（key=value / key: value 形式）"""

    _PATTERN = re.compile(
        r"((?:password|passwd|token|secret|authorization|api[_-]?key)\s*[=:]\s*)"
        r"[\"']?[^\"'\s,}]+[\"']?",
        re.IGNORECASE
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self._PATTERN.sub(r"\1****", message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


class RequestIdFilter(logging.Filter):
    """为每条日志附加当前请求 ID"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = get_request_id()
        return True


# ==================== 事件日志 ====================

class EventLogger:
    """以事件名 + 字段的形式记录日志，字段写入 JSON 的 data 部分"""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def event(self, name: str, level: int = logging.INFO, **fields: Any):
        self.logger.log(level, name, extra={"extra_data": fields})

    def request_started(self, request: Request):
        self.event(
            "request_started",
            level=logging.DEBUG,
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None
        )

    def request_completed(self, request: Request, status_code: int, duration_ms: float):
        # 5xx 记为 ERROR，4xx 记为 WARNING
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.event(
            "request_completed",
            level=level,
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=round(duration_ms, 2)
        )

    def request_failed(self, request: Request, error: Exception):
        self.logger.error(
            "request_failed",
            exc_info=error,
            extra={"extra_data": {
                "method": request.method,
                "path": request.url.path,
                "error_type": type(error).__name__,
            }}
        )


def get_event_logger(name: str = "http") -> EventLogger:
    return EventLogger(name)


# ==================== FastAPI 中间件 ====================

class MonitoringMiddleware(BaseHTTPMiddleware):
    """监控中间件

    为每个请求分配请求 ID（优先沿用客户端传入的 X-Request-ID），
    记录请求耗时和状态码，并回写 X-Request-ID 响应头。
    """

    def __init__(self, app, logger: Optional[EventLogger] = None):
        super().__init__(app)
        self.logger = logger or get_event_logger()

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()

        with request_context(request_id):
            self.logger.request_started(request)

            start = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as e:
                self.logger.request_failed(request, e)
                raise

            self.logger.request_completed(
                request,
                response.status_code,
                (time.perf_counter() - start) * 1000
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response


# ==================== 全局配置 ====================

def setup_logging(
    level: int = logging.INFO,
    structured: bool = True,
    service_name: str = "coffee-shop-api"
):
    """配置根日志记录器

    Args:
        level: 日志级别
        structured: True 输出 JSON 行，False 输出纯文本
        service_name: 写入 JSON 的 service 字段
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if structured:
        handler.setFormatter(StructuredFormatter(service_name))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s"
        ))

    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # uvicorn 自带的访问日志与中间件重复
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"日志已配置: level={logging.getLevelName(level)}, structured={structured}"
    )
