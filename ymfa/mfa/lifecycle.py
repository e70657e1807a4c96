"""MFA 生命周期管理

在 DISABLED / PENDING / ENABLED 之间转换用户状态，并校验 TOTP 验证码。

    activate    PENDING -> ENABLED（需要一个有效验证码）
    deactivate  任意状态 -> DISABLED（幂等）
    verify      校验验证码，不修改记录
"""

import time
from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple

from ymfa.config import MFASettings
from ymfa.log import get_logger

from .atomic import update_with_retry
from .base import MfaState, UserMfaRecord, enable, reset
from .exceptions import AlreadyEnabledError, InvalidCodeError, NotProvisionedError
from .totp import verify_totp

if TYPE_CHECKING:
    from ymfa.store.base import MfaRecordStore

logger = get_logger()


class MFALifecycleManager:
    """MFA 生命周期管理器

    Args:
        store: 记录存储
        settings: MFA 配置
        clock: 返回 Unix 时间戳的函数，默认 time.time

    使用示例:
        manager = MFALifecycleManager(store, MFASettings())
        manager.activate(user_id=1, code="123456")
        manager.verify(user_id=1, code="654321")
        manager.deactivate(user_id=1)
    """

    def __init__(
        self,
        store: "MfaRecordStore",
        settings: Optional[MFASettings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.store = store
        self.settings = settings or MFASettings()
        self.clock = clock or time.time

    def _check_code(self, record: UserMfaRecord, code: str) -> bool:
        return verify_totp(
            record.mfa_secret,
            code,
            time_step=self.settings.time_step,
            digits=self.settings.digits,
            window=self.settings.window,
            timestamp=self.clock(),
        )

    def get_state(self, user_id: Any) -> MfaState:
        """当前 MFA 状态"""
        return self.store.get_user(user_id).state

    def activate(self, user_id: Any, code: str) -> None:
        """用一个有效验证码激活 MFA

        Raises:
            AlreadyEnabledError: 已激活
            NotProvisionedError: 未生成密钥和恢复码
            InvalidCodeError: 验证码无效
            UserNotFoundError: 用户不存在
        """

        def step(record: UserMfaRecord) -> Tuple[UserMfaRecord, None]:
            state = record.state
            if state is MfaState.ENABLED:
                raise AlreadyEnabledError(user_id=record.id)
            if state is MfaState.DISABLED:
                raise NotProvisionedError(user_id=record.id)
            if not self._check_code(record, code):
                logger.warning(f"Rejected MFA activation code for user {record.id}")
                raise InvalidCodeError(user_id=record.id)
            return enable(record), None

        update_with_retry(
            self.store,
            user_id,
            step,
            max_retries=self.settings.max_update_retries,
        )
        logger.info(f"MFA enabled for user {user_id}")

    def deactivate(self, user_id: Any) -> None:
        """禁用 MFA 并清空密钥和恢复码（幂等）

        Raises:
            UserNotFoundError: 用户不存在
        """

        def step(record: UserMfaRecord) -> Tuple[Optional[UserMfaRecord], bool]:
            if record.is_clean:
                return None, False
            return reset(record), True

        changed = update_with_retry(
            self.store,
            user_id,
            step,
            max_retries=self.settings.max_update_retries,
        )
        if changed:
            logger.info(f"MFA disabled for user {user_id}")
        else:
            logger.debug(f"MFA already disabled for user {user_id}")

    def verify(self, user_id: Any, code: str) -> None:
        """校验验证码，不修改记录

        PENDING 状态下也可以校验，便于激活前确认 Authenticator 已正确配置。

        Raises:
            NotProvisionedError: 没有密钥
            InvalidCodeError: 验证码无效
            UserNotFoundError: 用户不存在
        """
        record = self.store.get_user(user_id)
        if record.mfa_secret is None:
            raise NotProvisionedError(user_id=record.id)
        if not self._check_code(record, code):
            logger.warning(f"Rejected MFA code for user {record.id}")
            raise InvalidCodeError(user_id=record.id)
        logger.debug(f"MFA code accepted for user {record.id}")


__all__ = ["MFALifecycleManager"]
