"""MFA 记录存储

- MfaRecordStore: 存储抽象（get_user / update_user / add_user）
- MemoryMfaRecordStore: 内存存储
- ORMMfaRecordStore: SQLAlchemy 存储（ver 列乐观锁）
"""

from .base import MfaRecordStore
from .memory import MemoryMfaRecordStore
from .orm import (
    MfaBase,
    MfaUser,
    ORMMfaRecordStore,
    create_mfa_user_model,
    create_session_factory,
)

__all__ = [
    "MfaRecordStore",
    "MemoryMfaRecordStore",
    "ORMMfaRecordStore",
    "MfaBase",
    "MfaUser",
    "create_mfa_user_model",
    "create_session_factory",
]
