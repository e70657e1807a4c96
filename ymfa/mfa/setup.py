"""MFA 服务组装

使用示例:
    from ymfa.mfa import setup_mfa
    from ymfa.store import MemoryMfaRecordStore

    mfa = setup_mfa(MemoryMfaRecordStore(), MFASettings(issuer="MyApp"))

    result = mfa.provision(user_id)
    mfa.activate(user_id, code)
    mfa.verify(user_id, code)
    mfa.deactivate(user_id)
"""

from typing import TYPE_CHECKING, Any, Callable, Optional

from ymfa.config import MFASettings

from .base import MfaState, ProvisioningResult
from .lifecycle import MFALifecycleManager
from .provisioner import SecretProvisioner

if TYPE_CHECKING:
    from ymfa.store.base import MfaRecordStore


class MFAService:
    """发放器与生命周期管理器的组合门面"""

    def __init__(
        self,
        provisioner: SecretProvisioner,
        lifecycle: MFALifecycleManager,
    ):
        self.provisioner = provisioner
        self.lifecycle = lifecycle

    @property
    def settings(self) -> MFASettings:
        return self.lifecycle.settings

    def provision(self, user_id: Any) -> ProvisioningResult:
        return self.provisioner.provision(user_id)

    def activate(self, user_id: Any, code: str) -> None:
        self.lifecycle.activate(user_id, code)

    def deactivate(self, user_id: Any) -> None:
        self.lifecycle.deactivate(user_id)

    def verify(self, user_id: Any, code: str) -> None:
        self.lifecycle.verify(user_id, code)

    def get_state(self, user_id: Any) -> MfaState:
        return self.lifecycle.get_state(user_id)


def setup_mfa(
    store: "MfaRecordStore",
    settings: Optional[MFASettings] = None,
    clock: Optional[Callable[[], float]] = None,
) -> MFAService:
    """快速组装 MFA 服务

    Args:
        store: 记录存储
        settings: MFA 配置，默认从环境变量（YMFA_MFA_*）读取
        clock: 返回 Unix 时间戳的函数，默认 time.time

    Returns:
        MFAService
    """
    settings = settings or MFASettings()
    return MFAService(
        provisioner=SecretProvisioner(store, settings),
        lifecycle=MFALifecycleManager(store, settings, clock=clock),
    )


__all__ = ["MFAService", "setup_mfa"]
