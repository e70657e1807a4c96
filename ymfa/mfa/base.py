"""MFA 基础定义

用户记录、状态枚举以及状态机的转换函数。

状态机:
    DISABLED --begin_enrollment--> PENDING --enable--> ENABLED
        ^                             |                   |
        +------------reset------------+-------reset-------+

每个转换函数接收完整的 UserMfaRecord，返回新的 UserMfaRecord，
不修改入参；持久化由记录存储的 update_user（按版本号比较后写入）完成。
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .exceptions import AlreadyEnabledError, InvalidMfaRecordError, NotProvisionedError


class MfaState(str, Enum):
    """MFA 状态"""
    DISABLED = "disabled"  # 未生成密钥
    PENDING = "pending"  # 已生成密钥和恢复码，尚未激活
    ENABLED = "enabled"  # 已激活


# 状态转换规则，key 为源状态，value 为允许的目标状态列表
MFA_TRANSITIONS: Dict[MfaState, List[MfaState]] = {
    MfaState.DISABLED: [MfaState.PENDING, MfaState.DISABLED],
    MfaState.PENDING: [MfaState.ENABLED, MfaState.DISABLED],
    MfaState.ENABLED: [MfaState.DISABLED],
}


@dataclass(frozen=True)
class UserMfaRecord:
    """用户的 MFA 字段

    是完整用户实体的一个子集，由外部用户存储持有。

    Attributes:
        id: 用户 ID
        email: 邮箱，用作 Authenticator 中的账户名
        mfa_secret: Base32 编码的 TOTP 密钥，未生成时为 None
        mfa_recovery_codes: 恢复码（有序，一次性）
        mfa_enabled: 是否已激活
        version: 存储版本号，用于并发写入时的比较
    """
    id: Any
    email: str
    mfa_secret: Optional[str] = None
    mfa_recovery_codes: Tuple[str, ...] = ()
    mfa_enabled: bool = False
    version: int = 1

    def __post_init__(self):
        # 存储层可能给出 list 或空字符串，统一成 tuple / None
        object.__setattr__(self, "mfa_recovery_codes", tuple(self.mfa_recovery_codes or ()))
        if not self.mfa_secret:
            object.__setattr__(self, "mfa_secret", None)

        if self.mfa_enabled and self.mfa_secret is None:
            raise InvalidMfaRecordError(
                "MFA cannot be enabled without a secret",
                user_id=self.id,
            )

    @property
    def state(self) -> MfaState:
        """当前状态

        只有密钥而没有恢复码的未激活记录视为 DISABLED（不完整的登记）。
        """
        if self.mfa_enabled:
            return MfaState.ENABLED
        if self.mfa_secret and self.mfa_recovery_codes:
            return MfaState.PENDING
        return MfaState.DISABLED

    @property
    def is_clean(self) -> bool:
        """三个 MFA 字段是否都处于空/假状态"""
        return not self.mfa_enabled and self.mfa_secret is None and not self.mfa_recovery_codes

    def __repr__(self) -> str:
        # 密钥和恢复码不出现在 repr 中
        return (
            f"<UserMfaRecord id={self.id!r} state={self.state.value} "
            f"recovery_codes={len(self.mfa_recovery_codes)} version={self.version}>"
        )


@dataclass(frozen=True)
class ProvisioningResult:
    """Authenticator 登记所需的材料

    Attributes:
        secret: Base32 密钥
        recovery_codes: 恢复码
        provisioning_uri: otpauth:// URI（用于生成二维码）
    """
    secret: str
    recovery_codes: Tuple[str, ...]
    provisioning_uri: str

    def __post_init__(self):
        object.__setattr__(self, "recovery_codes", tuple(self.recovery_codes))

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            "secret": self.secret,
            "recovery_codes": list(self.recovery_codes),
            "provisioning_uri": self.provisioning_uri,
        }

    def __repr__(self) -> str:
        return f"<ProvisioningResult recovery_codes={len(self.recovery_codes)}>"


def _check_transition(record: UserMfaRecord, target: MfaState) -> None:
    """校验状态转换，不允许时抛出对应的领域异常"""
    current = record.state
    if target in MFA_TRANSITIONS[current]:
        return
    if current is MfaState.ENABLED:
        raise AlreadyEnabledError(user_id=record.id)
    if target is MfaState.ENABLED:
        raise NotProvisionedError(
            "Cannot enable MFA without generating secret and recovery codes",
            user_id=record.id,
        )
    raise InvalidMfaRecordError(
        f"Cannot transition from '{current.value}' to '{target.value}'",
        user_id=record.id,
    )


def begin_enrollment(
    record: UserMfaRecord,
    secret: str,
    recovery_codes: Sequence[str],
) -> UserMfaRecord:
    """DISABLED -> PENDING：写入新密钥和恢复码，保持未激活"""
    _check_transition(record, MfaState.PENDING)
    if not secret or not recovery_codes:
        raise InvalidMfaRecordError(
            "Enrollment requires a secret and at least one recovery code",
            user_id=record.id,
        )
    return replace(
        record,
        mfa_secret=secret,
        mfa_recovery_codes=tuple(recovery_codes),
        mfa_enabled=False,
    )


def enable(record: UserMfaRecord) -> UserMfaRecord:
    """PENDING -> ENABLED"""
    _check_transition(record, MfaState.ENABLED)
    return replace(record, mfa_enabled=True)


def reset(record: UserMfaRecord) -> UserMfaRecord:
    """任意状态 -> DISABLED：清空全部 MFA 字段"""
    _check_transition(record, MfaState.DISABLED)
    return replace(
        record,
        mfa_enabled=False,
        mfa_secret=None,
        mfa_recovery_codes=(),
    )


__all__ = [
    "MfaState",
    "MFA_TRANSITIONS",
    "UserMfaRecord",
    "ProvisioningResult",
    "begin_enrollment",
    "enable",
    "reset",
]
