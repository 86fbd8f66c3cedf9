"""
测试公共夹具

提供内存版饮品目录/订单存储，以及基于临时 SQLite 文件的数据库和 API 客户端。
"""

from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

import pytest

from config import Settings
from config.settings import DatabaseSettings
from core.interfaces import DrinkCatalog, OrderStore
from models.drink import Drink
from models.order import Order
from services import DrinkService, OrderService


class InMemoryDrinkCatalog(DrinkCatalog):
    """内存饮品目录"""

    def __init__(self, drinks: List[Drink]):
        self._drinks: Dict[int, Drink] = {drink.id: drink for drink in drinks}

    def find_all(self) -> List[Drink]:
        return sorted(self._drinks.values(), key=lambda d: d.name)

    def find_by_id(self, drink_id: int) -> Optional[Drink]:
        return self._drinks.get(drink_id)

    def find_by_slug(self, slug: str) -> Optional[Drink]:
        return next((d for d in self._drinks.values() if d.slug == slug), None)


class InMemoryOrderStore(OrderStore):
    """内存订单存储，save/update 返回重新构造的对象以模拟重新加载"""

    def __init__(self):
        self._orders: Dict[int, Order] = {}
        self._next_id = 1
        self.save_calls = 0

    def _copy(self, order: Order) -> Order:
        return replace(order, items=list(order.items))

    def find_all(self, limit: int = 50, offset: int = 0) -> List[Order]:
        ordered = sorted(self._orders.values(), key=lambda o: o.id, reverse=True)
        return [self._copy(o) for o in ordered[offset:offset + limit]]

    def find_by_id(self, order_id: int) -> Optional[Order]:
        order = self._orders.get(order_id)
        return self._copy(order) if order else None

    def save(self, order: Order) -> Order:
        self.save_calls += 1
        order_id = self._next_id
        self._next_id += 1
        now = datetime.now()
        stored = replace(
            order,
            id=order_id,
            items=[item.with_order_id(order_id) for item in order.items],
            created_at=now,
            updated_at=now,
        )
        self._orders[order_id] = stored
        return self._copy(stored)

    def update(self, order: Order) -> Order:
        if order.id is None:
            raise ValueError("Cannot update order without ID")
        self._orders[order.id] = replace(self._copy(order), updated_at=datetime.now())
        return self._copy(self._orders[order.id])

    def delete(self, order_id: int) -> bool:
        return self._orders.pop(order_id, None) is not None

    def count(self) -> int:
        return len(self._orders)


def make_drink(drink_id: int, name: str, base_price: float, allowed_sizes, **kwargs) -> Drink:
    return Drink(
        id=drink_id,
        name=name,
        slug=kwargs.pop("slug", name.lower().replace(" ", "-")),
        type=kwargs.pop("type", "coffee"),
        base_price=base_price,
        has_milk=kwargs.pop("has_milk", False),
        allowed_sizes=allowed_sizes,
        **kwargs
    )


@pytest.fixture
def drinks() -> List[Drink]:
    return [
        make_drink(1, "Latte", 3.00, ["small", "medium", "large"], has_milk=True),
        make_drink(2, "Espresso", 2.50, ["small"]),
        make_drink(3, "Green Tea", 2.00, ["small", "medium", "large"], type="tea"),
    ]


@pytest.fixture
def catalog(drinks) -> InMemoryDrinkCatalog:
    return InMemoryDrinkCatalog(drinks)


@pytest.fixture
def order_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def drink_service(catalog) -> DrinkService:
    return DrinkService(catalog)


@pytest.fixture
def order_service(order_store, drink_service) -> OrderService:
    return OrderService(order_store, drink_service)


# ==================== SQLite / API ====================

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """指向临时数据库文件的配置"""
    return Settings(
        environment="testing",
        database=DatabaseSettings(path=tmp_path / "test.db", wal_mode=False),
    )


@pytest.fixture
def db(tmp_path):
    from infrastructure.database import Database, seed_catalog

    database = Database(db_path=tmp_path / "repo.db", wal_mode=False)
    seed_catalog(database)
    yield database
    database.close()


@pytest.fixture
def client(test_settings):
    from fastapi.testclient import TestClient
    from app.main import create_app
    from infrastructure.container import setup_default_services

    container = setup_default_services(settings=test_settings)
    app = create_app(container=container)
    with TestClient(app) as test_client:
        yield test_client
