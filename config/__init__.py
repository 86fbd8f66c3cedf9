"""配置模块"""

from .settings import (
    get_settings,
    reload_settings,
    Settings,
    DatabaseSettings,
    ServerSettings,
    LoggingSettings,
    CORSSettings,
    PaginationSettings,
)

__all__ = [
    "get_settings",
    "reload_settings",
    "Settings",
    "DatabaseSettings",
    "ServerSettings",
    "LoggingSettings",
    "CORSSettings",
    "PaginationSettings",
]
