"""
核心类型测试
"""

import pytest

from core.types import (
    DrinkSize, DrinkType, OrderStatus, ValidationErrorType, round_price
)


class TestRoundPrice:
    """价格取整测试"""

    @pytest.mark.parametrize("value,expected", [
        (3.9, 3.9),
        (2.345, 2.35),
        (2.344, 2.34),
        (4.8, 4.8),
        (0.0, 0.0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_price(value) == expected

    def test_float_artifacts(self):
        """浮点误差不影响结果"""
        assert round_price(3.2 * 1.3) == 4.16
        assert round_price(2.8 * 1.6) == 4.48


class TestDrinkSize:
    """杯型枚举测试"""

    def test_multipliers(self):
        assert DrinkSize.SMALL.price_multiplier == 1.0
        assert DrinkSize.MEDIUM.price_multiplier == 1.3
        assert DrinkSize.LARGE.price_multiplier == 1.6

    def test_values(self):
        assert DrinkSize.values() == ["small", "medium", "large"]

    def test_try_from(self):
        assert DrinkSize.try_from("medium") is DrinkSize.MEDIUM
        assert DrinkSize.try_from(DrinkSize.LARGE) is DrinkSize.LARGE
        assert DrinkSize.try_from("huge") is None
        assert DrinkSize.try_from(None) is None
        assert DrinkSize.try_from(1) is None

    def test_case_sensitive(self):
        """杯型区分大小写"""
        assert DrinkSize.is_valid("small") is True
        assert DrinkSize.is_valid("Small") is False

    def test_serializes_as_string(self):
        assert DrinkSize.MEDIUM == "medium"
        assert DrinkSize.MEDIUM.value == "medium"


class TestOrderStatus:
    """订单状态枚举测试"""

    def test_values(self):
        assert OrderStatus.values() == ["pending", "preparing", "ready", "completed", "cancelled"]

    def test_try_from(self):
        assert OrderStatus.try_from("preparing") is OrderStatus.PREPARING
        assert OrderStatus.try_from("bogus") is None
        assert OrderStatus.try_from(None) is None

    def test_is_valid(self):
        assert OrderStatus.is_valid("ready")
        assert not OrderStatus.is_valid("READY")


class TestDrinkType:

    def test_values(self):
        assert DrinkType.values() == ["coffee", "tea"]
        assert DrinkType.is_valid("tea")
        assert not DrinkType.is_valid("juice")


class TestValidationErrorType:
    """错误分类到 HTTP 状态码的映射"""

    def test_http_status(self):
        assert ValidationErrorType.NOT_FOUND.http_status == 404
        assert ValidationErrorType.INVALID_INPUT.http_status == 422
        assert ValidationErrorType.BUSINESS_RULE.http_status == 422
