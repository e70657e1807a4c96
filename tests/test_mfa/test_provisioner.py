"""SecretProvisioner 测试"""

import logging
import uuid

import pytest

from ymfa.config import MFASettings
from ymfa.mfa import (
    AlreadyEnabledError,
    MfaState,
    SecretProvisioner,
    UserMfaRecord,
    UserNotFoundError,
    decode_secret,
    enable,
    reset,
)


@pytest.fixture
def provisioner(memory_store, mfa_settings):
    return SecretProvisioner(memory_store, mfa_settings)


class TestProvision:
    """provision 测试"""

    def test_fresh_provision(self, provisioner, memory_store):
        """首次调用生成密钥和恢复码，记录进入 PENDING"""
        result = provisioner.provision(1)

        assert len(decode_secret(result.secret)) == 20
        assert len(result.recovery_codes) == 10
        assert len(set(result.recovery_codes)) == 10
        for code in result.recovery_codes:
            assert uuid.UUID(code).version == 4

        record = memory_store.get_user(1)
        assert record.state is MfaState.PENDING
        assert record.mfa_enabled is False
        assert record.mfa_secret == result.secret
        assert record.mfa_recovery_codes == result.recovery_codes

    def test_provisioning_uri(self, provisioner):
        result = provisioner.provision(1)
        assert result.provisioning_uri == (
            f"otpauth://totp/ExampleCo:alice@example.com"
            f"?secret={result.secret}&issuer=ExampleCo"
        )

    def test_idempotent_while_pending(self, provisioner, memory_store):
        """PENDING 状态重复调用返回同一组材料且不写入"""
        first = provisioner.provision(1)
        version = memory_store.get_user(1).version

        second = provisioner.provision(1)

        assert second.secret == first.secret
        assert second.recovery_codes == first.recovery_codes
        assert second.provisioning_uri == first.provisioning_uri
        assert memory_store.get_user(1).version == version

    def test_issuer_change_rerenders_uri(self, memory_store):
        first = SecretProvisioner(memory_store, MFASettings(issuer="Old")).provision(1)
        second = SecretProvisioner(memory_store, MFASettings(issuer="New")).provision(1)
        assert second.secret == first.secret
        assert second.provisioning_uri.startswith("otpauth://totp/New:alice@example.com?")
        assert second.provisioning_uri.endswith("&issuer=New")

    def test_already_enabled(self, provisioner, memory_store):
        provisioner.provision(1)
        record = memory_store.get_user(1)
        memory_store.update_user(1, enable(record), expected_version=record.version)
        before = memory_store.get_user(1)

        with pytest.raises(AlreadyEnabledError) as exc_info:
            provisioner.provision(1)

        assert exc_info.value.user_id == 1
        # 失败时记录不变
        assert memory_store.get_user(1) == before

    def test_codes_never_repeat_across_provisionings(self, provisioner, memory_store):
        seen = set()
        for _ in range(3):
            result = provisioner.provision(1)
            assert not seen & set(result.recovery_codes)
            seen.update(result.recovery_codes)
            # 禁用后重新生成
            record = memory_store.get_user(1)
            memory_store.update_user(1, reset(record), expected_version=record.version)

    def test_users_are_independent(self, provisioner):
        a = provisioner.provision(1)
        b = provisioner.provision(2)
        assert a.secret != b.secret
        assert "bob@example.com" in b.provisioning_uri

    def test_custom_sizes(self, memory_store):
        settings = MFASettings(secret_bytes=32, recovery_code_count=4)
        result = SecretProvisioner(memory_store, settings).provision(1)
        assert len(decode_secret(result.secret)) == 32
        assert len(result.recovery_codes) == 4

    def test_incomplete_enrollment_regenerated(self, memory_store, provisioner):
        """只有密钥没有恢复码的记录重新生成"""
        memory_store.add_user(
            UserMfaRecord(id=9, email="dave@example.com", mfa_secret="JBSWY3DPEHPK3PXP")
        )
        result = provisioner.provision(9)
        assert result.secret != "JBSWY3DPEHPK3PXP"
        assert len(result.recovery_codes) == 10

    def test_user_not_found(self, provisioner):
        with pytest.raises(UserNotFoundError):
            provisioner.provision(404)

    def test_secret_never_logged(self, provisioner, caplog):
        with caplog.at_level(logging.DEBUG, logger="ymfa"):
            result = provisioner.provision(1)
            provisioner.provision(1)

        assert caplog.records
        assert result.secret not in caplog.text
        for code in result.recovery_codes:
            assert code not in caplog.text
