"""基础设施模块"""

from .database import Database, DrinkRepository, OrderRepository, seed_catalog
from .health import HealthStatus, HealthChecker, create_health_checker
from .monitoring import (
    MonitoringMiddleware, get_event_logger, setup_logging
)
from .container import Container, setup_default_services

__all__ = [
    # database
    "Database",
    "DrinkRepository",
    "OrderRepository",
    "seed_catalog",
    # health
    "HealthStatus",
    "HealthChecker",
    "create_health_checker",
    # monitoring
    "MonitoringMiddleware",
    "get_event_logger",
    "setup_logging",
    # container
    "Container",
    "setup_default_services",
]
