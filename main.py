"""
咖啡店订单 API - 启动入口

Usage:
    python main.py
    python main.py --port 9000 --reload
"""

import logging
import argparse

from config import get_settings
from infrastructure.monitoring import setup_logging

logger = logging.getLogger(__name__)


def run(host: str = None, port: int = None, reload: bool = False):
    """
    运行服务器

    Args:
        host: 监听地址，默认读取 SERVER_HOST
        port: 监听端口，默认读取 SERVER_PORT
        reload: 是否启用自动重载（开发模式）
    """
    import uvicorn

    settings = get_settings()
    setup_logging(
        level=getattr(logging, settings.logging.level),
        structured=settings.logging.structured
    )

    host = host or settings.server.host
    port = port or settings.server.port
    logger.info(f"{settings.app_name} v{settings.app_version} 启动于 http://{host}:{port}")

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=None if reload else settings.server.workers,
        log_config=None
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="咖啡店订单 API")
    parser.add_argument("--host", default=None, help="监听地址")
    parser.add_argument("--port", "-p", type=int, default=None, help="监听端口")
    parser.add_argument("--reload", "-r", action="store_true", help="启用自动重载（开发模式）")
    args = parser.parse_args()
    run(host=args.host, port=args.port, reload=args.reload)
