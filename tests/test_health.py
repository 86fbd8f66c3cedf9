"""
健康检查模块测试
"""

import pytest
import asyncio
from unittest.mock import Mock

from infrastructure.health import (
    HealthChecker, HealthStatus, CheckResult, HealthReport,
    create_health_checker, make_database_check
)


class TestHealthChecker:
    """HealthChecker 测试"""

    @pytest.fixture
    def checker(self):
        """创建测试用健康检查器"""
        return HealthChecker(version="2.0.0", timeout=0.5)

    def test_register_check(self, checker):
        """测试注册健康检查"""
        def my_check():
            return {"status": "ok"}

        checker.register("test", my_check)
        assert "test" in checker._checks

    @pytest.mark.asyncio
    async def test_check_all_empty(self, checker):
        """没有检查项时视为健康"""
        report = await checker.check_all()

        assert report.status == HealthStatus.HEALTHY
        assert report.checks == []
        assert report.version == "2.0.0"

    @pytest.mark.asyncio
    async def test_check_all_success(self, checker):
        """测试所有检查成功"""
        checker.register("check1", lambda: {"value": 1})
        checker.register("check2", lambda: {"value": 2})

        report = await checker.check_all()

        assert report.status == HealthStatus.HEALTHY
        assert len(report.checks) == 2
        assert report.http_status == 200

    @pytest.mark.asyncio
    async def test_check_all_with_failure(self, checker):
        """测试包含失败的检查"""
        checker.register("ok_check", lambda: {"status": "ok"})
        checker.register("bad_check", lambda: (_ for _ in ()).throw(RuntimeError("Test error")))

        report = await checker.check_all()

        assert report.status == HealthStatus.UNHEALTHY
        assert report.http_status == 503
        bad = next(c for c in report.checks if c.name == "bad_check")
        assert bad.error == "Test error"

    @pytest.mark.asyncio
    async def test_check_timeout(self, checker):
        """测试检查超时"""
        async def slow_check():
            await asyncio.sleep(2)

        checker.register("slow", slow_check)
        result = await checker.check_one("slow")

        assert result.status == HealthStatus.UNHEALTHY
        assert "超时" in result.error

    @pytest.mark.asyncio
    async def test_check_one(self, checker):
        """测试单项检查"""
        checker.register("test", lambda: {"value": 42})

        result = await checker.check_one("test")

        assert result.name == "test"
        assert result.is_up
        assert result.details == {"value": 42}

    @pytest.mark.asyncio
    async def test_check_one_not_found(self, checker):
        """测试检查不存在的项"""
        result = await checker.check_one("nonexistent")
        assert result is None

    @pytest.mark.asyncio
    async def test_async_check_function(self, checker):
        """测试异步检查函数"""
        async def async_check():
            await asyncio.sleep(0.01)
            return {"async": True}

        checker.register("async_test", async_check)

        result = await checker.check_one("async_test")

        assert result.status == HealthStatus.HEALTHY
        assert result.details == {"async": True}


class TestHealthReport:
    """HealthReport 测试"""

    def test_to_dict(self):
        """测试转换为字典"""
        report = HealthReport(
            status=HealthStatus.HEALTHY,
            checks=[
                CheckResult(name="database", status=HealthStatus.HEALTHY, latency_ms=1.234),
                CheckResult(name="other", status=HealthStatus.UNHEALTHY, latency_ms=5.0, error="down"),
            ],
            version="1.0.0"
        )

        result = report.to_dict()

        assert result["status"] == "healthy"
        assert result["version"] == "1.0.0"
        assert "timestamp" in result
        assert result["checks"]["database"] == {"status": "up", "latency_ms": 1.23, "details": {}}
        assert result["checks"]["other"]["status"] == "down"
        assert result["checks"]["other"]["message"] == "down"


class TestDatabaseCheck:
    """数据库检查测试"""

    def test_counts_rows(self, db):
        check = make_database_check(db)
        details = check()

        assert details["message"] == "Connected to SQLite"
        assert details["drinks"] == 9
        assert details["orders"] == 0

    @pytest.mark.asyncio
    async def test_create_health_checker(self, db):
        checker = create_health_checker(db, version="1.2.3")

        report = await checker.check_all()

        assert report.status == HealthStatus.HEALTHY
        assert report.version == "1.2.3"
        assert [c.name for c in report.checks] == ["database"]

    @pytest.mark.asyncio
    async def test_database_failure(self):
        db = Mock()
        db.get_cursor.side_effect = RuntimeError("connection refused")
        checker = create_health_checker(db)

        result = await checker.check_one("database")

        assert result.status == HealthStatus.UNHEALTHY
        assert "connection refused" in result.error
