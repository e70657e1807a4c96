"""MFALifecycleManager 测试

通过 setup_mfa 组装的服务覆盖 activate / deactivate / verify / get_state。
"""

import logging

import pytest

from ymfa.exceptions import ErrorCode
from ymfa.mfa import (
    AlreadyEnabledError,
    InvalidCodeError,
    MfaState,
    NotProvisionedError,
    UserMfaRecord,
    UserNotFoundError,
    generate_totp,
)


def current_code(secret, clock, offset=0):
    return generate_totp(secret, timestamp=clock() + offset)


def far_code(secret, clock):
    """距当前时间 4 个时间步的验证码；与窗口内验证码碰撞时返回 None"""
    code = current_code(secret, clock, offset=-120)
    window = {current_code(secret, clock, offset=o) for o in (-30, 0, 30)}
    return None if code in window else code


class TestActivate:
    """activate 测试"""

    def test_activate_with_current_code(self, mfa_service, memory_store, clock):
        result = mfa_service.provision(1)

        mfa_service.activate(1, current_code(result.secret, clock))

        record = memory_store.get_user(1)
        assert record.mfa_enabled is True
        assert record.mfa_secret == result.secret
        assert record.mfa_recovery_codes == result.recovery_codes
        assert mfa_service.get_state(1) is MfaState.ENABLED

    @pytest.mark.parametrize("offset", [-30, 30])
    def test_activate_within_drift_window(self, mfa_service, clock, offset):
        result = mfa_service.provision(1)
        mfa_service.activate(1, current_code(result.secret, clock, offset))
        assert mfa_service.get_state(1) is MfaState.ENABLED

    def test_activate_without_provisioning(self, mfa_service, memory_store):
        before = memory_store.get_user(1)
        with pytest.raises(NotProvisionedError) as exc_info:
            mfa_service.activate(1, "123456")
        assert exc_info.value.code == ErrorCode.MFA_NOT_PROVISIONED
        assert memory_store.get_user(1) == before

    def test_activate_with_wrong_code(self, mfa_service, memory_store, clock):
        result = mfa_service.provision(1)
        code = far_code(result.secret, clock)
        if code is None:
            pytest.skip("far code collides with the current window")

        before = memory_store.get_user(1)
        with pytest.raises(InvalidCodeError):
            mfa_service.activate(1, code)

        assert memory_store.get_user(1) == before
        assert mfa_service.get_state(1) is MfaState.PENDING

    def test_activate_with_malformed_code(self, mfa_service):
        mfa_service.provision(1)
        with pytest.raises(InvalidCodeError):
            mfa_service.activate(1, "abc")

    @pytest.mark.parametrize("code", ["２８７０８２", "١٢٣٤٥٦"])
    def test_activate_with_non_ascii_digits(self, mfa_service, memory_store, code):
        """全角和阿拉伯-印度数字不是有效验证码"""
        mfa_service.provision(1)
        before = memory_store.get_user(1)

        with pytest.raises(InvalidCodeError):
            mfa_service.activate(1, code)

        assert memory_store.get_user(1) == before

    def test_activate_twice(self, mfa_service, memory_store, clock):
        """已激活后再次激活总是 AlreadyEnabledError，即使验证码有效"""
        result = mfa_service.provision(1)
        mfa_service.activate(1, current_code(result.secret, clock))
        before = memory_store.get_user(1)

        with pytest.raises(AlreadyEnabledError):
            mfa_service.activate(1, current_code(result.secret, clock))

        assert memory_store.get_user(1) == before

    def test_activate_after_clock_moves_on(self, mfa_service, clock):
        result = mfa_service.provision(1)
        code = current_code(result.secret, clock)
        clock.advance(300)
        if code in {current_code(result.secret, clock, o) for o in (-30, 0, 30)}:
            pytest.skip("stale code collides with the current window")

        with pytest.raises(InvalidCodeError):
            mfa_service.activate(1, code)

    def test_activate_user_not_found(self, mfa_service):
        with pytest.raises(UserNotFoundError):
            mfa_service.activate(404, "123456")

    def test_rejected_code_logged_without_secret(self, mfa_service, clock, caplog):
        result = mfa_service.provision(1)
        with caplog.at_level(logging.DEBUG, logger="ymfa"):
            with pytest.raises(InvalidCodeError):
                mfa_service.activate(1, "abcdef")

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert warnings
        assert result.secret not in caplog.text


class TestDeactivate:
    """deactivate 测试"""

    def test_deactivate_enabled(self, mfa_service, memory_store, clock):
        result = mfa_service.provision(1)
        mfa_service.activate(1, current_code(result.secret, clock))

        mfa_service.deactivate(1)

        record = memory_store.get_user(1)
        assert record.mfa_enabled is False
        assert record.mfa_secret is None
        assert record.mfa_recovery_codes == ()
        assert mfa_service.get_state(1) is MfaState.DISABLED

    def test_deactivate_pending(self, mfa_service, memory_store):
        mfa_service.provision(1)
        mfa_service.deactivate(1)
        assert memory_store.get_user(1).is_clean

    def test_deactivate_idempotent(self, mfa_service, memory_store):
        """已禁用时不写入"""
        version = memory_store.get_user(1).version

        mfa_service.deactivate(1)
        mfa_service.deactivate(1)

        assert memory_store.get_user(1).version == version
        assert memory_store.get_user(1).is_clean

    def test_deactivate_clears_incomplete_enrollment(self, mfa_service, memory_store):
        memory_store.add_user(
            UserMfaRecord(id=9, email="dave@example.com", mfa_secret="JBSWY3DPEHPK3PXP")
        )
        mfa_service.deactivate(9)
        assert memory_store.get_user(9).is_clean

    def test_deactivate_enabled_record_without_codes(self, mfa_service, memory_store):
        memory_store.add_user(
            UserMfaRecord(
                id=9,
                email="dave@example.com",
                mfa_secret="JBSWY3DPEHPK3PXP",
                mfa_enabled=True,
            )
        )
        mfa_service.deactivate(9)
        assert memory_store.get_user(9).is_clean

    def test_reprovision_after_deactivate(self, mfa_service, clock):
        """禁用后重新发放得到新的密钥和恢复码"""
        first = mfa_service.provision(1)
        mfa_service.activate(1, current_code(first.secret, clock))
        mfa_service.deactivate(1)

        second = mfa_service.provision(1)

        assert second.secret != first.secret
        assert not set(second.recovery_codes) & set(first.recovery_codes)
        assert mfa_service.get_state(1) is MfaState.PENDING

    def test_deactivate_user_not_found(self, mfa_service):
        with pytest.raises(UserNotFoundError):
            mfa_service.deactivate(404)


class TestVerify:
    """verify 测试"""

    def test_verify_enabled(self, mfa_service, memory_store, clock):
        result = mfa_service.provision(1)
        mfa_service.activate(1, current_code(result.secret, clock))
        before = memory_store.get_user(1)

        mfa_service.verify(1, current_code(result.secret, clock))

        assert memory_store.get_user(1) == before

    def test_verify_pending(self, mfa_service, memory_store, clock):
        """PENDING 状态也可以校验，且不会激活"""
        result = mfa_service.provision(1)
        mfa_service.verify(1, current_code(result.secret, clock))
        assert memory_store.get_user(1).state is MfaState.PENDING

    def test_verify_without_secret(self, mfa_service):
        with pytest.raises(NotProvisionedError):
            mfa_service.verify(1, "123456")

    def test_verify_after_deactivate(self, mfa_service, clock):
        result = mfa_service.provision(1)
        mfa_service.activate(1, current_code(result.secret, clock))
        mfa_service.deactivate(1)

        with pytest.raises(NotProvisionedError):
            mfa_service.verify(1, current_code(result.secret, clock))

    def test_verify_wrong_code(self, mfa_service, clock):
        result = mfa_service.provision(1)
        mfa_service.activate(1, current_code(result.secret, clock))
        code = far_code(result.secret, clock)
        if code is None:
            pytest.skip("far code collides with the current window")

        with pytest.raises(InvalidCodeError) as exc_info:
            mfa_service.verify(1, code)
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("code", ["２８７０８２", "١٢٣٤٥٦"])
    def test_verify_non_ascii_digits(self, mfa_service, code):
        mfa_service.provision(1)
        with pytest.raises(InvalidCodeError):
            mfa_service.verify(1, code)

    def test_verify_user_not_found(self, mfa_service):
        with pytest.raises(UserNotFoundError):
            mfa_service.verify(404, "123456")


class TestGetState:
    """get_state 测试"""

    def test_state_progression(self, mfa_service, clock):
        assert mfa_service.get_state(1) is MfaState.DISABLED
        result = mfa_service.provision(1)
        assert mfa_service.get_state(1) is MfaState.PENDING
        mfa_service.activate(1, current_code(result.secret, clock))
        assert mfa_service.get_state(1) is MfaState.ENABLED
        mfa_service.deactivate(1)
        assert mfa_service.get_state(1) is MfaState.DISABLED
