"""TOTP 多因素认证模块

- SecretProvisioner: 生成密钥、恢复码和 otpauth URI
- MFALifecycleManager: 激活、禁用、校验
- setup_mfa: 组装以上两者

使用示例:
    from ymfa.mfa import setup_mfa
    from ymfa.store import MemoryMfaRecordStore

    mfa = setup_mfa(MemoryMfaRecordStore())
    result = mfa.provision(user_id=1)
    # 用户扫描 result.provisioning_uri 生成的二维码
    mfa.activate(user_id=1, code="123456")
"""

from .base import (
    MfaState,
    MFA_TRANSITIONS,
    UserMfaRecord,
    ProvisioningResult,
    begin_enrollment,
    enable,
    reset,
)

from .exceptions import (
    MFAException,
    AlreadyEnabledError,
    NotProvisionedError,
    InvalidCodeError,
    InvalidMfaRecordError,
    UserNotFoundError,
    StaleRecordError,
)

from .totp import (
    generate_secret,
    decode_secret,
    hotp,
    generate_totp,
    verify_totp,
    build_provisioning_uri,
)

from .recovery import generate_recovery_codes
from .atomic import update_with_retry
from .provisioner import SecretProvisioner
from .lifecycle import MFALifecycleManager
from .setup import MFAService, setup_mfa

__all__ = [
    # Base
    "MfaState",
    "MFA_TRANSITIONS",
    "UserMfaRecord",
    "ProvisioningResult",
    "begin_enrollment",
    "enable",
    "reset",

    # Exceptions
    "MFAException",
    "AlreadyEnabledError",
    "NotProvisionedError",
    "InvalidCodeError",
    "InvalidMfaRecordError",
    "UserNotFoundError",
    "StaleRecordError",

    # TOTP / 恢复码
    "generate_secret",
    "decode_secret",
    "hotp",
    "generate_totp",
    "verify_totp",
    "build_provisioning_uri",
    "generate_recovery_codes",

    # Components
    "update_with_retry",
    "SecretProvisioner",
    "MFALifecycleManager",
    "MFAService",
    "setup_mfa",
]
