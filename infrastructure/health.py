"""
健康检查模块

提供系统健康检查，默认检查数据库连接。
"""

import time
import asyncio
import logging
from enum import Enum
from typing import Dict, Any, Callable, Optional, List
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """健康状态"""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """单项检查结果"""
    name: str
    status: HealthStatus
    latency_ms: float
    details: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_up(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "up" if self.is_up else "down",
            "latency_ms": round(self.latency_ms, 2),
            "details": self.details,
            **({"message": self.error} if self.error else {})
        }


@dataclass
class HealthReport:
    """健康检查报告"""
    status: HealthStatus
    checks: List[CheckResult]
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    version: str = "1.0.0"

    @property
    def http_status(self) -> int:
        return 200 if self.status == HealthStatus.HEALTHY else 503

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": {check.name: check.to_dict() for check in self.checks}
        }


class HealthChecker:
    """健康检查器

    支持注册多个健康检查，异步执行并汇总结果。
    """

    def __init__(self, version: str = "1.0.0", timeout: float = 5.0):
        self._checks: Dict[str, Callable] = {}
        self._timeout = timeout  # 单项检查超时时间
        self.version = version

    def register(self, name: str, check_func: Callable):
        """注册健康检查

        Args:
            name: 检查项名称
            check_func: 检查函数，可以是同步或异步函数
        """
        self._checks[name] = check_func
        logger.debug(f"注册健康检查: {name}")

    async def _run_check(self, name: str, check_func: Callable) -> CheckResult:
        """执行单项检查"""
        start = time.time()
        try:
            if asyncio.iscoroutinefunction(check_func):
                coro = check_func()
            else:
                coro = asyncio.to_thread(check_func)
            result = await asyncio.wait_for(coro, timeout=self._timeout)

            latency = (time.time() - start) * 1000
            return CheckResult(
                name=name,
                status=HealthStatus.HEALTHY,
                latency_ms=latency,
                details=result if isinstance(result, dict) else {}
            )
        except asyncio.TimeoutError:
            latency = (time.time() - start) * 1000
            return CheckResult(
                name=name,
                status=HealthStatus.UNHEALTHY,
                latency_ms=latency,
                error=f"检查超时 ({self._timeout}s)"
            )
        except Exception as e:
            latency = (time.time() - start) * 1000
            logger.warning(f"健康检查失败 [{name}]: {e}")
            return CheckResult(
                name=name,
                status=HealthStatus.UNHEALTHY,
                latency_ms=latency,
                error=str(e)
            )

    async def check_all(self) -> HealthReport:
        """执行所有健康检查"""
        if not self._checks:
            return HealthReport(status=HealthStatus.HEALTHY, checks=[], version=self.version)

        # 并发执行所有检查
        tasks = [
            self._run_check(name, func)
            for name, func in self._checks.items()
        ]
        results = await asyncio.gather(*tasks)

        # 计算总体状态
        statuses = [r.status for r in results]
        if all(s == HealthStatus.HEALTHY for s in statuses):
            overall = HealthStatus.HEALTHY
        elif any(s == HealthStatus.UNHEALTHY for s in statuses):
            overall = HealthStatus.UNHEALTHY
        else:
            overall = HealthStatus.DEGRADED

        return HealthReport(status=overall, checks=list(results), version=self.version)

    async def check_one(self, name: str) -> Optional[CheckResult]:
        """执行单项健康检查"""
        if name not in self._checks:
            return None
        return await self._run_check(name, self._checks[name])


# ==================== 内置健康检查 ====================

def make_database_check(db) -> Callable[[], Dict[str, Any]]:
    """构造数据库连接检查"""

    def check_database() -> Dict[str, Any]:
        start = time.time()
        with db.get_cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM drinks")
            drink_count = cursor.fetchone()[0]

            cursor.execute("SELECT COUNT(*) FROM orders")
            order_count = cursor.fetchone()[0]

        latency = (time.time() - start) * 1000
        return {
            "message": "Connected to SQLite",
            "drinks": drink_count,
            "orders": order_count,
            "query_latency_ms": round(latency, 2)
        }

    return check_database


def create_health_checker(db, version: str = "1.0.0") -> HealthChecker:
    """创建带内置检查的健康检查器"""
    checker = HealthChecker(version=version)
    checker.register("database", make_database_check(db))
    logger.info("健康检查器已初始化")
    return checker
