"""
依赖注入容器

管理数据库、仓库和服务实例的构造与生命周期，服务之间只通过构造参数依赖。
所有服务都是容器内单例，首次获取时才创建。
"""

import inspect
import logging
from typing import Dict, Any, Callable, Optional, TypeVar, Type
from threading import RLock
from dataclasses import dataclass

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class ServiceDescriptor:
    """服务描述符"""
    key: str
    factory: Callable[..., Any]
    instance: Optional[Any] = None


class Container:
    """依赖注入容器

    Usage:
        container = Container()
        container.register_singleton('database', lambda: Database(path))
        container.register_singleton('drink_repository', lambda c: DrinkRepository(c.get('database')))

        repo = container.get('drink_repository')
    """

    def __init__(self):
        self._services: Dict[str, ServiceDescriptor] = {}
        # 工厂函数会递归调用 get()，需要可重入锁
        self._lock = RLock()

    def register_singleton(self, key: str, factory: Callable[..., T]) -> 'Container':
        """注册单例服务（延迟创建）

        Args:
            key: 服务标识符
            factory: 工厂函数，可选接收容器作为参数

        Returns:
            容器实例（支持链式调用）
        """
        with self._lock:
            self._services[key] = ServiceDescriptor(key=key, factory=factory)
            logger.debug(f"注册服务: {key}")
        return self

    def register_instance(self, key: str, instance: T) -> 'Container':
        """直接注册实例（测试时可用于替换默认服务）"""
        with self._lock:
            self._services[key] = ServiceDescriptor(
                key=key,
                factory=lambda: instance,
                instance=instance
            )
            logger.debug(f"注册实例: {key}")
        return self

    def get(self, key: str, expected_type: Optional[Type[T]] = None) -> T:
        """获取服务实例

        Raises:
            KeyError: 服务未注册
        """
        with self._lock:
            if key not in self._services:
                raise KeyError(f"服务未注册: {key}")

            descriptor = self._services[key]
            if descriptor.instance is None:
                descriptor.instance = self._create_instance(descriptor)
            return descriptor.instance

    def _create_instance(self, descriptor: ServiceDescriptor) -> Any:
        try:
            if inspect.signature(descriptor.factory).parameters:
                return descriptor.factory(self)
            return descriptor.factory()
        except Exception as e:
            logger.error(f"创建服务失败 [{descriptor.key}]: {e}")
            raise

    def reset(self, key: Optional[str] = None):
        """重置服务实例，下次获取时重新创建

        Args:
            key: 指定服务，为 None 则重置所有
        """
        with self._lock:
            if key:
                if key in self._services:
                    self._services[key].instance = None
            else:
                for descriptor in self._services.values():
                    descriptor.instance = None
            logger.debug(f"重置服务: {key or 'all'}")

    def list_services(self) -> Dict[str, Dict[str, Any]]:
        """列出所有注册的服务及是否已创建实例"""
        return {
            key: {"has_instance": descriptor.instance is not None}
            for key, descriptor in self._services.items()
        }


# ==================== 应用初始化 ====================

def setup_default_services(container: Optional[Container] = None, settings=None) -> Container:
    """注册应用默认服务

    Args:
        container: 目标容器，为 None 时新建
        settings: 应用配置，为 None 时读取 get_settings()
    """
    from config import get_settings
    from infrastructure.database import Database, DrinkRepository, OrderRepository, seed_catalog
    from infrastructure.health import create_health_checker
    from services import DrinkService, OrderService

    c = container or Container()
    settings = settings or get_settings()

    def build_database(_c: Container) -> Database:
        db = Database(
            db_path=settings.database.path,
            timeout=settings.database.timeout,
            wal_mode=settings.database.wal_mode
        )
        if settings.database.seed_catalog:
            seed_catalog(db)
        return db

    c.register_instance('settings', settings)
    c.register_singleton('database', build_database)
    c.register_singleton('drink_repository', lambda c: DrinkRepository(c.get('database')))
    c.register_singleton('order_repository', lambda c: OrderRepository(c.get('database')))
    c.register_singleton('drink_service', lambda c: DrinkService(c.get('drink_repository')))
    c.register_singleton('order_service', lambda c: OrderService(
        c.get('order_repository'),
        c.get('drink_service')
    ))
    c.register_singleton('health_checker', lambda c: create_health_checker(
        c.get('database'),
        version=settings.app_version
    ))

    logger.info(f"已注册 {len(c.list_services())} 个默认服务")
    return c
