"""异常处理模块

提供业务异常类。MFA 领域异常定义在 ymfa.mfa.exceptions 中，
均继承自这里的 BusinessException。

使用示例:
    from ymfa.exceptions import ErrorCode, ResourceNotFoundException

    raise ResourceNotFoundException("用户不存在", code=ErrorCode.USER_NOT_FOUND)
"""

from .exceptions import (
    ErrorCode,                      # 错误代码枚举
    ErrorCodeType,
    BusinessException,              # 业务异常基类
    ResourceNotFoundException,      # 404
    ResourceConflictException,      # 409
)

__all__ = [
    "ErrorCode",
    "ErrorCodeType",
    "BusinessException",
    "ResourceNotFoundException",
    "ResourceConflictException",
]
