"""
YMFA - TOTP 多因素认证核心

提供密钥发放、MFA 生命周期管理、记录存储、配置和日志等功能
"""

from .version import __version__, __author__, __description__

# 导出 MFA 核心
from .mfa import (
    MfaState,
    UserMfaRecord,
    ProvisioningResult,
    SecretProvisioner,
    MFALifecycleManager,
    MFAService,
    setup_mfa,
    # 异常
    MFAException,
    AlreadyEnabledError,
    NotProvisionedError,
    InvalidCodeError,
    InvalidMfaRecordError,
    UserNotFoundError,
    StaleRecordError,
)

# 导出记录存储
from .store import (
    MfaRecordStore,
    MemoryMfaRecordStore,
    ORMMfaRecordStore,
)

# 导出配置
from .config import (
    AppSettings,
    MFASettings,
    LoggingSettings,
    DatabaseSettings,
    load_yaml_config,
)

# 导出日志
from .log import (
    setup_logger,
    setup_root_logger,
    get_logger,
)

# 导出异常基类
from .exceptions import (
    ErrorCode,
    BusinessException,
)

__all__ = [
    "__version__",
    "__author__",
    "__description__",

    # MFA
    "MfaState",
    "UserMfaRecord",
    "ProvisioningResult",
    "SecretProvisioner",
    "MFALifecycleManager",
    "MFAService",
    "setup_mfa",
    "MFAException",
    "AlreadyEnabledError",
    "NotProvisionedError",
    "InvalidCodeError",
    "InvalidMfaRecordError",
    "UserNotFoundError",
    "StaleRecordError",

    # 存储
    "MfaRecordStore",
    "MemoryMfaRecordStore",
    "ORMMfaRecordStore",

    # 配置
    "AppSettings",
    "MFASettings",
    "LoggingSettings",
    "DatabaseSettings",
    "load_yaml_config",

    # 日志
    "setup_logger",
    "setup_root_logger",
    "get_logger",

    # 异常
    "ErrorCode",
    "BusinessException",
]
