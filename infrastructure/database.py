"""
SQLite 数据库持久化层

提供饮品目录和订单的存储实现（DrinkCatalog / OrderStore）。
"""

import json
import sqlite3
import threading
import logging
from typing import Optional, List, Dict, Any, Iterable
from datetime import datetime
from contextlib import contextmanager
from pathlib import Path

from core.interfaces import DrinkCatalog, OrderStore
from models.drink import Drink
from models.order import Order, OrderItem
from .exceptions import DatabaseConnectionError, DatabaseQueryError

logger = logging.getLogger(__name__)

# 默认数据库路径 (项目根目录的 data 文件夹)
DEFAULT_DB_PATH = Path(__file__).parent.parent / "data" / "coffee_shop.db"


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


class Database:
    """SQLite 数据库管理器

    特性:
    - 线程本地连接（每线程一个连接）
    - WAL 模式支持更好的并发
    - 写操作串行化，transaction() 提供多语句原子写入
    """

    def __init__(
        self,
        db_path: Optional[Path] = None,
        timeout: float = 30.0,
        wal_mode: bool = True
    ):
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.timeout = timeout
        self.wal_mode = wal_mode
        self._local = threading.local()
        self._write_lock = threading.RLock()

        # 连接统计
        self._connection_count = 0
        self._stats_lock = threading.Lock()

        # 确保目录存在
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_tables()
        logger.info(f"数据库初始化完成: {self.db_path}")

    def _get_connection(self) -> sqlite3.Connection:
        """获取当前线程的数据库连接（带健康检查）"""
        if getattr(self._local, "connection", None) is None:
            try:
                conn = sqlite3.connect(
                    str(self.db_path),
                    check_same_thread=False,
                    timeout=self.timeout,
                    isolation_level=None  # 自动提交模式，事务由 transaction() 显式管理
                )
                conn.row_factory = sqlite3.Row

                conn.execute("PRAGMA foreign_keys = ON")
                if self.wal_mode:
                    conn.execute("PRAGMA journal_mode = WAL")
                conn.execute("PRAGMA synchronous = NORMAL")

                self._local.connection = conn

                with self._stats_lock:
                    self._connection_count += 1

                logger.debug(f"创建新数据库连接 (总连接数: {self._connection_count})")

            except sqlite3.Error as e:
                raise DatabaseConnectionError(f"数据库连接失败: {e}")

        # 连接健康检查
        try:
            self._local.connection.execute("SELECT 1")
        except sqlite3.Error:
            logger.warning("数据库连接已断开，正在重连...")
            self._local.connection = None
            return self._get_connection()

        return self._local.connection

    def stats(self) -> Dict:
        """获取数据库统计"""
        with self._stats_lock:
            return {
                "db_path": str(self.db_path),
                "connection_count": self._connection_count,
            }

    @contextmanager
    def get_cursor(self, write: bool = False):
        """获取数据库游标的上下文管理器

        Args:
            write: 是否是写操作（需要加锁）
        """
        conn = self._get_connection()

        if write:
            self._write_lock.acquire()

        try:
            cursor = conn.cursor()
            yield cursor
        except sqlite3.Error as e:
            raise DatabaseQueryError(f"数据库操作失败: {e}")
        finally:
            if write:
                self._write_lock.release()

    @contextmanager
    def transaction(self):
        """多语句原子写入

        块内任何异常都会回滚全部语句并原样向上抛出（sqlite 错误转换为 DatabaseQueryError）。
        """
        conn = self._get_connection()
        with self._write_lock:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn.cursor()
                conn.execute("COMMIT")
            except sqlite3.Error as e:
                conn.execute("ROLLBACK")
                raise DatabaseQueryError(f"数据库事务失败: {e}")
            except BaseException:
                conn.execute("ROLLBACK")
                raise

    def _init_tables(self):
        """初始化数据库表"""
        with self.get_cursor(write=True) as cursor:
            # 饮品表
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS drinks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    slug TEXT NOT NULL UNIQUE,
                    type TEXT NOT NULL,
                    base_price REAL NOT NULL,
                    has_milk INTEGER NOT NULL DEFAULT 0,
                    allowed_sizes TEXT NOT NULL DEFAULT '[]',
                    components TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            # 订单表
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS orders (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    customer_name TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending',
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            # 订单项表
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS order_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    order_id INTEGER NOT NULL,
                    drink_id INTEGER NOT NULL,
                    size TEXT NOT NULL,
                    quantity INTEGER NOT NULL DEFAULT 1,
                    cup_text TEXT,
                    price REAL NOT NULL,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY (order_id) REFERENCES orders(id) ON DELETE CASCADE,
                    FOREIGN KEY (drink_id) REFERENCES drinks(id)
                )
            """)

            # 创建索引
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_order_items_order
                ON order_items(order_id)
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_orders_created
                ON orders(created_at)
            """)

    def close(self):
        """关闭当前线程的数据库连接"""
        if getattr(self._local, "connection", None) is not None:
            self._local.connection.close()
            self._local.connection = None


class DrinkRepository(DrinkCatalog):
    """饮品数据仓库"""

    def __init__(self, db: Database):
        self.db = db

    def find_all(self) -> List[Drink]:
        with self.db.get_cursor() as cursor:
            cursor.execute("SELECT * FROM drinks ORDER BY name ASC")
            return [Drink.from_row(dict(row)) for row in cursor.fetchall()]

    def find_by_id(self, drink_id: int) -> Optional[Drink]:
        with self.db.get_cursor() as cursor:
            cursor.execute("SELECT * FROM drinks WHERE id = ? LIMIT 1", (drink_id,))
            row = cursor.fetchone()
            if row:
                return Drink.from_row(dict(row))
            return None

    def find_by_slug(self, slug: str) -> Optional[Drink]:
        with self.db.get_cursor() as cursor:
            cursor.execute("SELECT * FROM drinks WHERE slug = ? LIMIT 1", (slug,))
            row = cursor.fetchone()
            if row:
                return Drink.from_row(dict(row))
            return None

    def add(self, drink: Drink) -> Drink:
        """写入饮品（用于初始化目录）"""
        now = _now()
        with self.db.get_cursor(write=True) as cursor:
            cursor.execute("""
                INSERT INTO drinks
                (name, slug, type, base_price, has_milk, allowed_sizes, components, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                drink.name,
                drink.slug,
                drink.type.value,
                drink.base_price,
                int(drink.has_milk),
                json.dumps(list(drink.allowed_sizes)),
                json.dumps(list(drink.components)),
                now,
                now
            ))
            drink_id = cursor.lastrowid
        logger.debug(f"添加饮品: {drink.slug} (id={drink_id})")
        return self.find_by_id(drink_id)

    def count(self) -> int:
        with self.db.get_cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM drinks")
            return cursor.fetchone()[0]


class OrderRepository(OrderStore):
    """订单数据仓库"""

    def __init__(self, db: Database):
        self.db = db

    def find_all(self, limit: int = 50, offset: int = 0) -> List[Order]:
        with self.db.get_cursor() as cursor:
            cursor.execute("""
                SELECT * FROM orders
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
            """, (limit, offset))
            rows = [dict(row) for row in cursor.fetchall()]
        return [Order.from_row(row, self._find_items(row["id"])) for row in rows]

    def find_by_id(self, order_id: int) -> Optional[Order]:
        with self.db.get_cursor() as cursor:
            cursor.execute("SELECT * FROM orders WHERE id = ? LIMIT 1", (order_id,))
            row = cursor.fetchone()
        if row is None:
            return None
        return Order.from_row(dict(row), self._find_items(order_id))

    def _find_items(self, order_id: int) -> List[OrderItem]:
        """获取订单的所有项（联表带出饮品名称）"""
        with self.db.get_cursor() as cursor:
            cursor.execute("""
                SELECT oi.*, d.name AS drink_name
                FROM order_items oi
                JOIN drinks d ON oi.drink_id = d.id
                WHERE oi.order_id = ?
                ORDER BY oi.id ASC
            """, (order_id,))
            return [OrderItem.from_row(dict(row)) for row in cursor.fetchall()]

    def save(self, order: Order) -> Order:
        """保存订单头和全部订单项（单个事务），然后重新加载"""
        now = _now()
        with self.db.transaction() as cursor:
            cursor.execute("""
                INSERT INTO orders (customer_name, status, notes, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
            """, (order.customer_name, order.status.value, order.notes, now, now))
            order_id = cursor.lastrowid
            self._insert_items(cursor, order_id, order.items, now)

        logger.debug(f"保存订单: {order_id} ({len(order.items)} 项)")
        saved = self.find_by_id(order_id)
        if saved is None:
            raise DatabaseQueryError(f"订单保存后重新加载失败: {order_id}")
        return saved

    def _insert_items(self, cursor, order_id: int, items: Iterable[OrderItem], created_at: str):
        for item in items:
            item = item.with_order_id(order_id)
            cursor.execute("""
                INSERT INTO order_items
                (order_id, drink_id, size, quantity, cup_text, price, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                item.order_id,
                item.drink_id,
                item.size.value,
                item.quantity,
                item.cup_text,
                item.price,
                created_at
            ))

    def update(self, order: Order) -> Order:
        """更新订单头字段（不改写订单项）"""
        if order.id is None:
            raise ValueError("Cannot update order without ID")

        with self.db.get_cursor(write=True) as cursor:
            cursor.execute("""
                UPDATE orders
                SET customer_name = ?, status = ?, notes = ?, updated_at = ?
                WHERE id = ?
            """, (order.customer_name, order.status.value, order.notes, _now(), order.id))
        logger.debug(f"更新订单: {order.id}")

        updated = self.find_by_id(order.id)
        if updated is None:
            raise DatabaseQueryError(f"订单更新后重新加载失败: {order.id}")
        return updated

    def delete(self, order_id: int) -> bool:
        """删除订单及其订单项"""
        with self.db.transaction() as cursor:
            cursor.execute("DELETE FROM order_items WHERE order_id = ?", (order_id,))
            cursor.execute("DELETE FROM orders WHERE id = ?", (order_id,))
            deleted = cursor.rowcount > 0
        logger.debug(f"删除订单: {order_id} (存在={deleted})")
        return deleted

    def count(self) -> int:
        with self.db.get_cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM orders")
            return cursor.fetchone()[0]


def seed_catalog(db: Database, catalog: Optional[List[Dict[str, Any]]] = None) -> int:
    """饮品表为空时写入默认目录

    Returns:
        写入的饮品数量
    """
    if catalog is None:
        from data.menu import DRINK_CATALOG
        catalog = DRINK_CATALOG

    repo = DrinkRepository(db)
    if repo.count() > 0:
        return 0

    for entry in catalog:
        repo.add(Drink(**entry))
    logger.info(f"已写入默认饮品目录: {len(catalog)} 项")
    return len(catalog)
