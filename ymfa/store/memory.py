"""内存 MFA 记录存储

适用于单进程部署和测试，重启后数据丢失。
"""

import threading
from dataclasses import replace
from typing import Any, Dict

from ymfa.log import get_logger
from ymfa.mfa.base import UserMfaRecord
from ymfa.mfa.exceptions import StaleRecordError, UserNotFoundError

from .base import MfaRecordStore

logger = get_logger()


class MemoryMfaRecordStore(MfaRecordStore):
    """内存 MFA 记录存储

    所有读写都在同一把锁内完成，update_user 的比较与写入因此是原子的。

    使用示例:
        store = MemoryMfaRecordStore()
        store.add_user(UserMfaRecord(id=1, email="john@example.com"))
    """

    def __init__(self):
        self._records: Dict[Any, UserMfaRecord] = {}
        self._lock = threading.Lock()

    def get_user(self, user_id: Any) -> UserMfaRecord:
        with self._lock:
            record = self._records.get(user_id)
        if record is None:
            raise UserNotFoundError(user_id)
        return record

    def update_user(
        self,
        user_id: Any,
        record: UserMfaRecord,
        expected_version: int,
    ) -> UserMfaRecord:
        with self._lock:
            current = self._records.get(user_id)
            if current is None:
                raise UserNotFoundError(user_id)
            if current.version != expected_version:
                logger.debug(
                    f"Version conflict for user {user_id}: "
                    f"expected {expected_version}, found {current.version}"
                )
                raise StaleRecordError(
                    user_id,
                    expected_version=expected_version,
                    actual_version=current.version,
                )
            stored = replace(
                current,
                mfa_secret=record.mfa_secret,
                mfa_recovery_codes=record.mfa_recovery_codes,
                mfa_enabled=record.mfa_enabled,
                version=current.version + 1,
            )
            self._records[user_id] = stored
            return stored

    def add_user(self, record: UserMfaRecord) -> UserMfaRecord:
        with self._lock:
            if record.id in self._records:
                raise ValueError(f"User already exists: {record.id}")
            self._records[record.id] = record
        return record

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["MemoryMfaRecordStore"]
