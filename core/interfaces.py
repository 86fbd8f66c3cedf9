"""
抽象接口定义

定义服务层依赖的存储接口，具体实现见 infrastructure.database。
"""

from abc import ABC, abstractmethod
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from models.drink import Drink
    from models.order import Order


class DrinkCatalog(ABC):
    """饮品目录抽象接口（只读）"""

    @abstractmethod
    def find_all(self) -> List['Drink']:
        """获取全部饮品"""
        pass

    @abstractmethod
    def find_by_id(self, drink_id: int) -> Optional['Drink']:
        """按 ID 获取饮品，不存在时返回 None"""
        pass

    @abstractmethod
    def find_by_slug(self, slug: str) -> Optional['Drink']:
        """按 slug 获取饮品，不存在时返回 None"""
        pass


class OrderStore(ABC):
    """订单存储抽象接口

    实现必须保证 save 的原子性：订单头和所有订单项要么全部写入，要么全部不写入。
    """

    @abstractmethod
    def find_all(self, limit: int = 50, offset: int = 0) -> List['Order']:
        """分页获取订单（最新在前）"""
        pass

    @abstractmethod
    def find_by_id(self, order_id: int) -> Optional['Order']:
        """按 ID 获取订单"""
        pass

    @abstractmethod
    def save(self, order: 'Order') -> 'Order':
        """保存新订单

        Args:
            order: 尚未持久化的订单

        Returns:
            重新加载后的订单（含 ID、时间戳和饮品名称）
        """
        pass

    @abstractmethod
    def update(self, order: 'Order') -> 'Order':
        """更新订单头字段（不改写订单项），返回重新加载后的订单"""
        pass

    @abstractmethod
    def delete(self, order_id: int) -> bool:
        """删除订单，返回是否存在该订单"""
        pass

    @abstractmethod
    def count(self) -> int:
        """订单总数"""
        pass
