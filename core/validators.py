"""
输入验证模块

HTTP 边界使用的轻量检查：必填字段、路径 ID、分页参数。
业务规则验证在 services 层完成。
"""

from typing import Any, List, Mapping, Optional, Tuple

from .types import MAX_DB_INTEGER


# ==================== 验证常量 ====================

DEFAULT_LIMIT = 50
MIN_LIMIT = 1
MAX_LIMIT = 100


# ==================== 验证函数 ====================

def find_missing_fields(body: Mapping[str, Any], fields: List[str]) -> List[str]:
    """检查必填字段

    字段不存在、为 None 或为空字符串都视为缺失。

    Returns:
        缺失的字段列表（保持传入顺序）
    """
    missing = []
    for name in fields:
        value = body.get(name)
        if value is None or value == "":
            missing.append(name)
    return missing


def parse_id_param(value: Any) -> Optional[int]:
    """解析路径中的 ID，必须是数据库整数范围内的正整数"""
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    if parsed <= 0 or parsed > MAX_DB_INTEGER:
        return None
    return parsed


def clamp_pagination(
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    max_limit: int = MAX_LIMIT,
    default_limit: int = DEFAULT_LIMIT
) -> Tuple[int, int]:
    """分页参数裁剪：limit 在 [1, max_limit]，offset 在 [0, MAX_DB_INTEGER]"""
    limit = default_limit if limit is None else limit
    offset = 0 if offset is None else offset
    return max(MIN_LIMIT, min(max_limit, limit)), max(0, min(MAX_DB_INTEGER, offset))


# ==================== 导出 ====================

__all__ = [
    'DEFAULT_LIMIT',
    'MIN_LIMIT',
    'MAX_LIMIT',
    'find_missing_fields',
    'parse_id_param',
    'clamp_pagination',
]
