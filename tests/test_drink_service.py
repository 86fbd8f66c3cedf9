"""
饮品服务测试
"""

from unittest.mock import Mock

from core.interfaces import DrinkCatalog
from services import DrinkService


class TestDrinkService:
    """DrinkService 测试"""

    def test_get_all_drinks(self, drink_service):
        names = [drink.name for drink in drink_service.get_all_drinks()]
        assert names == ["Espresso", "Green Tea", "Latte"]

    def test_get_drink_by_id(self, drink_service):
        assert drink_service.get_drink_by_id(1).name == "Latte"
        assert drink_service.get_drink_by_id(99) is None

    def test_get_drink_by_slug(self, drink_service):
        assert drink_service.get_drink_by_slug("green-tea").id == 3
        assert drink_service.get_drink_by_slug("mocha") is None

    def test_validate_size_ok(self, drink_service):
        result = drink_service.validate_drink_size(1, "large")
        assert result.is_valid

    def test_validate_size_drink_missing(self, drink_service):
        result = drink_service.validate_drink_size(99, "small")
        assert not result.is_valid
        assert result.is_not_found()
        assert result.error == "Drink with ID 99 not found"

    def test_validate_size_not_available(self, drink_service):
        result = drink_service.validate_drink_size(2, "large")
        assert not result.is_valid
        assert not result.is_not_found()
        assert result.error == "Size 'large' is not available for Espresso. Allowed sizes: small"

    def test_get_drink_price(self, drink_service):
        assert drink_service.get_drink_price(1, "small") == 3.0
        assert drink_service.get_drink_price(1, "medium") == 3.9
        assert drink_service.get_drink_price(1, "large") == 4.8

    def test_get_drink_price_unavailable(self, drink_service):
        assert drink_service.get_drink_price(99, "small") is None
        assert drink_service.get_drink_price(2, "large") is None

    def test_get_drink_price_idempotent(self, drink_service):
        """相同输入、目录不变时价格一致"""
        first = drink_service.get_drink_price(3, "medium")
        second = drink_service.get_drink_price(3, "medium")
        assert first == second == 2.6

    def test_uses_catalog_interface(self, drinks):
        catalog = Mock(spec=DrinkCatalog)
        catalog.find_by_id.return_value = drinks[0]
        service = DrinkService(catalog)

        service.get_drink_price(1, "small")

        catalog.find_by_id.assert_called_once_with(1)
