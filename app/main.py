"""
咖啡店订单 API - FastAPI 应用入口

饮品目录查询、订单创建/查询/更新/删除以及健康检查。
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from config import Settings
from infrastructure.container import Container, setup_default_services
from infrastructure.exceptions import APIError, NotFoundError
from infrastructure.health import HealthStatus
from infrastructure.monitoring import MonitoringMiddleware
from app.api import drinks_router, orders_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """启动时初始化数据库（建表、写入默认目录），停止时关闭连接并释放服务实例"""
    container = app.state.container
    db = container.get('database')
    logger.info(f"服务启动: {db.db_path}")
    yield
    db.close()
    container.reset()
    logger.info("服务已停止")


def create_app(container: Optional[Container] = None, settings: Optional[Settings] = None) -> FastAPI:
    """创建 FastAPI 应用

    Args:
        container: 预先配置的依赖容器（测试时注入），为 None 时注册默认服务
        settings: 应用配置，为 None 时读取 get_settings()
    """
    if container is None:
        container = setup_default_services(settings=settings)
    settings = container.get('settings')

    app = FastAPI(
        title=settings.app_name,
        description="咖啡店点单与订单管理 API",
        version=settings.app_version,
        lifespan=lifespan,
        # 生产环境不暴露接口文档
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc"
    )
    app.state.container = container

    # CORS 配置
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        max_age=settings.cors.max_age,
    )

    # 监控中间件
    app.add_middleware(MonitoringMiddleware)

    _register_exception_handlers(app)
    _register_health_routes(app)

    app.include_router(drinks_router)
    app.include_router(orders_router)

    return app


# ==================== 异常处理 ====================

def _register_exception_handlers(app: FastAPI):

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        status_code = exc.status_code or 500
        if status_code >= 500:
            # 服务端错误的细节（如数据库报错原文）只写日志，不返回给客户端
            logger.error(f"请求处理失败 [{request.url.path}]: {exc.message}")
            return JSONResponse(
                status_code=status_code,
                content={"error": True, "message": "Internal server error"}
            )
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "error": True,
                "message": "Invalid request body",
                "errors": {"details": jsonable_errors(exc)}
            }
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": True, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"未处理的异常 [{request.url.path}]: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": True, "message": "Internal server error"}
        )


def jsonable_errors(exc: RequestValidationError) -> list:
    """提取校验错误中可序列化的部分"""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


# ==================== 健康检查 ====================

def _register_health_routes(app: FastAPI):

    @app.get("/api/health")
    async def health_check(request: Request):
        """系统健康检查"""
        checker = request.app.state.container.get('health_checker')
        report = await checker.check_all()
        return JSONResponse(status_code=report.http_status, content=report.to_dict())

    @app.get("/api/health/{check_name}")
    async def health_check_single(check_name: str, request: Request):
        """单项健康检查"""
        checker = request.app.state.container.get('health_checker')
        result = await checker.check_one(check_name)

        if result is None:
            raise NotFoundError(f"Unknown health check: {check_name}", resource=check_name)

        status_code = 200 if result.status == HealthStatus.HEALTHY else 503
        return JSONResponse(status_code=status_code, content={"name": result.name, **result.to_dict()})


app = create_app()
