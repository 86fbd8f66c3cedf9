"""
配置管理系统

使用 Pydantic Settings 管理应用配置，支持环境变量和 .env 文件。
"""

import logging
from typing import List, Optional
from pathlib import Path
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """数据库相关配置"""
    model_config = SettingsConfigDict(env_prefix="DB_")

    path: Path = Field(
        default=Path("data/coffee_shop.db"),
        description="数据库文件路径"
    )
    timeout: float = Field(default=30.0, ge=1.0, le=120.0, description="连接超时时间")
    wal_mode: bool = Field(default=True, description="是否启用 WAL 模式")
    seed_catalog: bool = Field(default=True, description="饮品表为空时写入默认目录")


class ServerSettings(BaseSettings):
    """服务器相关配置"""
    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = Field(default="0.0.0.0", description="监听地址")
    port: int = Field(default=8000, ge=1, le=65535, description="监听端口")
    debug: bool = Field(default=False, description="调试模式")
    workers: int = Field(default=1, ge=1, le=16, description="工作进程数")


class LoggingSettings(BaseSettings):
    """日志相关配置"""
    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="日志级别")
    format: str = Field(default="structured", description="日志格式 (structured/plain)")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"无效的日志级别: {v}, 有效值: {valid_levels}")
        return v

    @property
    def structured(self) -> bool:
        return self.format == "structured"


class CORSSettings(BaseSettings):
    """CORS 相关配置"""
    model_config = SettingsConfigDict(env_prefix="CORS_")

    origins: List[str] = Field(default=["*"], description="允许的来源")
    allow_credentials: bool = Field(default=False, description="是否允许凭证")
    allow_methods: List[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        description="允许的方法"
    )
    allow_headers: List[str] = Field(
        default=["Content-Type", "Authorization"],
        description="允许的请求头"
    )
    max_age: int = Field(default=600, ge=0, le=86400, description="预检请求缓存时间(秒)")


class PaginationSettings(BaseSettings):
    """分页相关配置"""
    model_config = SettingsConfigDict(env_prefix="PAGINATION_")

    default_limit: int = Field(default=50, ge=1, le=100, description="默认每页数量")
    max_limit: int = Field(default=100, ge=1, le=1000, description="每页最大数量")


class Settings(BaseSettings):
    """应用主配置"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # 应用信息
    app_name: str = Field(default="Coffee Shop Order API", description="应用名称")
    app_version: str = Field(default="1.0.0", description="应用版本")
    environment: str = Field(default="development", description="运行环境")

    # 子配置
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid_envs = ['development', 'staging', 'production', 'testing']
        v = v.lower()
        if v not in valid_envs:
            raise ValueError(f"无效的环境: {v}, 有效值: {valid_envs}")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def to_dict(self) -> dict:
        """转换为字典"""
        return {
            "app_name": self.app_name,
            "app_version": self.app_version,
            "environment": self.environment,
            "database": {
                "path": str(self.database.path),
                "wal_mode": self.database.wal_mode,
                "seed_catalog": self.database.seed_catalog
            },
            "server": {
                "host": self.server.host,
                "port": self.server.port
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format
            },
            "pagination": {
                "default_limit": self.pagination.default_limit,
                "max_limit": self.pagination.max_limit
            }
        }


# ==================== 全局实例 ====================

@lru_cache()
def get_settings() -> Settings:
    """获取配置实例（缓存）"""
    settings = Settings()
    logger.info(f"配置已加载: {settings.environment} 环境")
    return settings


def reload_settings() -> Settings:
    """重新加载配置"""
    get_settings.cache_clear()
    return get_settings()
