"""
MFA 模块 - 异常定义

所有异常都继承自 BusinessException，调用方可以按类型区分，
也可以统一通过 code / status_code 转换成响应。
"""

from typing import Any, Optional

from fastapi import status

from ymfa.exceptions import (
    BusinessException,
    ErrorCode,
    ErrorCodeType,
    ResourceConflictException,
    ResourceNotFoundException,
)


class MFAException(BusinessException):
    """MFA 异常基类"""

    def __init__(
        self,
        message: str = "MFA error",
        code: ErrorCodeType = ErrorCode.MFA_ERROR,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        **extra: Any
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=status_code,
            **extra
        )


class AlreadyEnabledError(MFAException):
    """MFA 已启用

    已启用的用户不能重新生成密钥或再次激活，需要先禁用。
    """

    def __init__(
        self,
        message: str = "MFA already enabled. Disable it to generate new secret and recovery codes",
        user_id: Any = None,
    ):
        super().__init__(
            message=message,
            code=ErrorCode.MFA_ALREADY_ENABLED,
            user_id=user_id,
        )
        self.user_id = user_id


class NotProvisionedError(MFAException):
    """尚未生成密钥和恢复码"""

    def __init__(
        self,
        message: str = "MFA secret and recovery codes have not been generated",
        user_id: Any = None,
    ):
        super().__init__(
            message=message,
            code=ErrorCode.MFA_NOT_PROVISIONED,
            user_id=user_id,
        )
        self.user_id = user_id


class InvalidCodeError(MFAException):
    """提交的验证码未通过校验，换一个新的验证码重试即可"""

    def __init__(
        self,
        message: str = "MFA code could not be verified",
        user_id: Any = None,
    ):
        super().__init__(
            message=message,
            code=ErrorCode.MFA_INVALID_CODE,
            user_id=user_id,
        )
        self.user_id = user_id


class InvalidMfaRecordError(MFAException):
    """记录字段组合违反 MFA 不变量（例如已启用但没有密钥）"""

    def __init__(self, message: str, user_id: Any = None):
        super().__init__(
            message=message,
            code=ErrorCode.MFA_INVALID_RECORD,
            user_id=user_id,
        )
        self.user_id = user_id


class UserNotFoundError(ResourceNotFoundException):
    """记录存储中不存在该用户"""

    def __init__(self, user_id: Any):
        super().__init__(
            message=f"User not found: {user_id}",
            code=ErrorCode.USER_NOT_FOUND,
            resource_type="User",
            resource_id=user_id,
        )
        self.user_id = user_id


class StaleRecordError(ResourceConflictException):
    """记录在读取后被其他请求修改（版本号不一致）"""

    def __init__(
        self,
        user_id: Any,
        expected_version: Optional[int] = None,
        actual_version: Optional[int] = None,
    ):
        super().__init__(
            message=f"MFA record of user {user_id} was modified concurrently",
            code=ErrorCode.VERSION_CONFLICT,
            user_id=user_id,
            expected_version=expected_version,
            actual_version=actual_version,
        )
        self.user_id = user_id
        self.expected_version = expected_version
        self.actual_version = actual_version


__all__ = [
    "MFAException",
    "AlreadyEnabledError",
    "NotProvisionedError",
    "InvalidCodeError",
    "InvalidMfaRecordError",
    "UserNotFoundError",
    "StaleRecordError",
]
