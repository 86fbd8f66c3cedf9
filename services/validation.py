"""
验证结果

服务层用于表达业务规则失败的结果类型。业务失败通过返回值传递，
基础设施故障（数据库异常等）仍以异常形式向上抛出。
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.types import ValidationErrorType


@dataclass(frozen=True)
class ValidationResult:
    """验证结果（成功 / 失败 + 错误分类）

    只能通过 success() / failure() / not_found() 构造。
    """
    is_valid: bool
    error: Optional[str] = None
    error_type: Optional[ValidationErrorType] = None

    def __post_init__(self):
        # 成功结果不携带错误；失败结果必须有错误信息和分类
        if self.is_valid:
            if self.error is not None or self.error_type is not None:
                raise ValueError("成功的验证结果不能包含错误信息")
        elif not self.error or self.error_type is None:
            raise ValueError("失败的验证结果必须包含错误信息和错误分类")

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def failure(
        cls,
        message: str,
        error_type: ValidationErrorType = ValidationErrorType.INVALID_INPUT
    ) -> "ValidationResult":
        return cls(is_valid=False, error=message, error_type=ValidationErrorType(error_type))

    @classmethod
    def not_found(cls, message: str) -> "ValidationResult":
        return cls.failure(message, ValidationErrorType.NOT_FOUND)

    def is_not_found(self) -> bool:
        return self.error_type == ValidationErrorType.NOT_FOUND

    @property
    def http_status(self) -> int:
        """对应的 HTTP 状态码（成功为 200）"""
        if self.is_valid:
            return 200
        return self.error_type.http_status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.is_valid,
            "error": self.error,
            "error_type": self.error_type.value if self.error_type else None,
        }
