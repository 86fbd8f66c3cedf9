"""饮品服务"""

import logging
from typing import List, Optional

from core.interfaces import DrinkCatalog
from models.drink import Drink
from .validation import ValidationResult

logger = logging.getLogger(__name__)


class DrinkService:
    """饮品查询与杯型/价格校验（只读）"""

    def __init__(self, catalog: DrinkCatalog):
        self.catalog = catalog

    def get_all_drinks(self) -> List[Drink]:
        return self.catalog.find_all()

    def get_drink_by_id(self, drink_id: int) -> Optional[Drink]:
        return self.catalog.find_by_id(drink_id)

    def get_drink_by_slug(self, slug: str) -> Optional[Drink]:
        return self.catalog.find_by_slug(slug)

    def validate_drink_size(self, drink_id: int, size: str) -> ValidationResult:
        """校验饮品存在且支持该杯型"""
        drink = self.catalog.find_by_id(drink_id)

        if drink is None:
            return ValidationResult.not_found(f"Drink with ID {drink_id} not found")

        if not drink.is_size_allowed(size):
            allowed = ", ".join(drink.allowed_sizes)
            logger.debug(f"杯型不可选: drink={drink.slug}, size={size}")
            return ValidationResult.failure(
                f"Size '{size}' is not available for {drink.name}. Allowed sizes: {allowed}"
            )

        return ValidationResult.success()

    def get_drink_price(self, drink_id: int, size: str) -> Optional[float]:
        """获取饮品在指定杯型下的价格

        饮品不存在或杯型不可选时返回 None。
        """
        drink = self.catalog.find_by_id(drink_id)
        if drink is None or not drink.is_size_allowed(size):
            return None
        return drink.get_price_for_size(size)
