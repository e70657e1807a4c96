"""密钥发放

为用户生成 TOTP 密钥和恢复码，写入记录但不激活 MFA。

- 已激活（ENABLED）的用户不能重新生成，抛出 AlreadyEnabledError
- 待激活（PENDING）的用户重复调用时返回同一组密钥和恢复码，不写入
- 其他情况生成新的密钥和恢复码，记录进入 PENDING
"""

from typing import TYPE_CHECKING, Any, Optional, Tuple

from ymfa.config import MFASettings
from ymfa.log import get_logger

from .atomic import update_with_retry
from .base import (
    MfaState,
    ProvisioningResult,
    UserMfaRecord,
    begin_enrollment,
)
from .exceptions import AlreadyEnabledError
from .recovery import generate_recovery_codes
from .totp import build_provisioning_uri, generate_secret

if TYPE_CHECKING:
    from ymfa.store.base import MfaRecordStore

logger = get_logger()


class SecretProvisioner:
    """TOTP 密钥发放器

    使用示例:
        provisioner = SecretProvisioner(store, MFASettings(issuer="MyApp"))
        result = provisioner.provision(user_id=1)
        # result.provisioning_uri 用于生成二维码
    """

    def __init__(self, store: "MfaRecordStore", settings: Optional[MFASettings] = None):
        self.store = store
        self.settings = settings or MFASettings()

    def build_uri(self, record: UserMfaRecord) -> str:
        """渲染记录当前密钥的 otpauth URI"""
        return build_provisioning_uri(
            record.mfa_secret,
            account=record.email,
            issuer=self.settings.issuer,
        )

    def _result(self, record: UserMfaRecord) -> ProvisioningResult:
        return ProvisioningResult(
            secret=record.mfa_secret,
            recovery_codes=record.mfa_recovery_codes,
            provisioning_uri=self.build_uri(record),
        )

    def _provision_step(
        self, record: UserMfaRecord
    ) -> Tuple[Optional[UserMfaRecord], ProvisioningResult]:
        state = record.state
        if state is MfaState.ENABLED:
            raise AlreadyEnabledError(user_id=record.id)

        if state is MfaState.PENDING:
            return None, self._result(record)

        new_record = begin_enrollment(
            record,
            secret=generate_secret(self.settings.secret_bytes),
            recovery_codes=generate_recovery_codes(self.settings.recovery_code_count),
        )
        return new_record, self._result(new_record)

    def provision(self, user_id: Any) -> ProvisioningResult:
        """生成（或返回待激活的）密钥、恢复码和 otpauth URI

        Args:
            user_id: 用户 ID

        Returns:
            ProvisioningResult

        Raises:
            AlreadyEnabledError: MFA 已激活
            UserNotFoundError: 用户不存在
        """
        try:
            result = update_with_retry(
                self.store,
                user_id,
                self._provision_step,
                max_retries=self.settings.max_update_retries,
            )
        except AlreadyEnabledError:
            logger.info(f"MFA provisioning refused for user {user_id}: already enabled")
            raise

        logger.info(f"MFA secret provisioned for user {user_id}")
        return result


__all__ = ["SecretProvisioner"]
