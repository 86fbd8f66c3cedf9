"""
依赖注入容器测试
"""

import pytest

from infrastructure.container import Container, setup_default_services
from infrastructure.database import Database, DrinkRepository, OrderRepository
from infrastructure.health import HealthChecker
from services import DrinkService, OrderService


class TestContainer:
    """Container 测试"""

    @pytest.fixture
    def container(self):
        """创建测试用容器"""
        return Container()

    def test_register_and_get_singleton(self, container):
        """测试注册和获取单例"""
        container.register_singleton('service', lambda: {"id": 1})

        service1 = container.get('service')
        service2 = container.get('service')

        assert service1 is service2
        assert service1["id"] == 1

    def test_register_instance(self, container):
        """测试直接注册实例"""
        instance = {"key": "value"}
        container.register_instance('service', instance)

        assert container.get('service') is instance

    def test_get_not_found(self, container):
        """测试获取不存在的服务"""
        with pytest.raises(KeyError) as exc_info:
            container.get('nonexistent')

        assert "服务未注册" in str(exc_info.value)

    def test_reset_single(self, container):
        """测试重置单个服务"""
        container.register_singleton('service', lambda: {"id": 1})
        first = container.get('service')

        container.reset('service')

        assert container._services['service'].instance is None
        assert container.get('service') is not first

    def test_reset_all(self, container):
        """测试重置所有服务"""
        container.register_singleton('s1', lambda: {})
        container.register_singleton('s2', lambda: {})
        container.get('s1')
        container.get('s2')

        container.reset()

        assert container._services['s1'].instance is None
        assert container._services['s2'].instance is None

    def test_factory_with_container(self, container):
        """测试工厂函数接收容器参数（嵌套获取不会死锁）"""
        container.register_singleton('config', lambda: {"db_url": "sqlite:///"})
        container.register_singleton('database', lambda c: {
            "url": c.get('config')["db_url"]
        })

        db = container.get('database')

        assert db["url"] == "sqlite:///"

    def test_factory_error_propagates(self, container):
        def broken():
            raise RuntimeError("boom")

        container.register_singleton('broken', broken)

        with pytest.raises(RuntimeError):
            container.get('broken')
        assert container._services['broken'].instance is None

    def test_chain_registration(self, container):
        """测试链式注册"""
        result = (container
            .register_singleton('s1', lambda: {})
            .register_instance('s2', {}))

        assert result is container
        assert set(container.list_services()) == {'s1', 's2'}

    def test_list_services(self, container):
        """测试列出服务"""
        container.register_singleton('s1', lambda: {})
        container.register_singleton('s2', lambda: {})
        container.register_instance('s3', {})
        container.get('s1')

        services = container.list_services()

        assert services['s1'] == {"has_instance": True}
        assert services['s2'] == {"has_instance": False}
        assert services['s3'] == {"has_instance": True}

    def test_reset_keeps_registered_instance(self, container):
        """重置后直接注册的实例仍然可以取回"""
        instance = {"key": "value"}
        container.register_instance('service', instance)

        container.reset()

        assert container.get('service') is instance


class TestDefaultServices:
    """默认服务注册测试"""

    @pytest.fixture
    def container(self, test_settings):
        c = setup_default_services(settings=test_settings)
        yield c
        if c._services['database'].instance is not None:
            c.get('database').close()

    def test_registered_keys(self, container):
        assert set(container.list_services()) == {
            'settings', 'database', 'drink_repository', 'order_repository',
            'drink_service', 'order_service', 'health_checker',
        }

    def test_lazy_database(self, container):
        """数据库在首次获取时才创建"""
        assert container.list_services()['database']['has_instance'] is False

    def test_wiring(self, container, test_settings):
        assert container.get('settings') is test_settings

        db = container.get('database')
        assert isinstance(db, Database)
        assert db.db_path == test_settings.database.path

        assert isinstance(container.get('drink_repository'), DrinkRepository)
        assert isinstance(container.get('order_repository'), OrderRepository)
        assert isinstance(container.get('health_checker'), HealthChecker)

        order_service = container.get('order_service')
        assert isinstance(order_service, OrderService)
        assert order_service.drink_service is container.get('drink_service')
        assert isinstance(order_service.drink_service, DrinkService)

    def test_catalog_seeded(self, container):
        assert len(container.get('drink_service').get_all_drinks()) == 9

    def test_seed_disabled(self, test_settings):
        test_settings.database.seed_catalog = False
        c = setup_default_services(settings=test_settings)

        assert c.get('drink_service').get_all_drinks() == []
        c.get('database').close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
