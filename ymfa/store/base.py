"""MFA 记录存储抽象

MFA 核心只依赖一个按用户 ID 读写的记录存储。写入是整条记录的
比较后写入（compare-and-swap）：只有存储中的版本号仍等于调用方读到的
版本号时才会写入，否则抛出 StaleRecordError，由调用方重新读取后再决定。
"""

from abc import ABC, abstractmethod
from typing import Any

from ymfa.mfa.base import UserMfaRecord


class MfaRecordStore(ABC):
    """MFA 记录存储抽象基类"""

    @abstractmethod
    def get_user(self, user_id: Any) -> UserMfaRecord:
        """读取用户记录

        Args:
            user_id: 用户 ID

        Returns:
            UserMfaRecord: 当前记录（含版本号）

        Raises:
            UserNotFoundError: 用户不存在
        """
        pass

    @abstractmethod
    def update_user(
        self,
        user_id: Any,
        record: UserMfaRecord,
        expected_version: int,
    ) -> UserMfaRecord:
        """原子地写入 MFA 字段

        Args:
            user_id: 用户 ID
            record: 新记录（只使用 MFA 字段）
            expected_version: 调用方读取时的版本号

        Returns:
            UserMfaRecord: 写入后的记录（版本号已递增）

        Raises:
            UserNotFoundError: 用户不存在
            StaleRecordError: 存储中的版本号与 expected_version 不一致
        """
        pass

    @abstractmethod
    def add_user(self, record: UserMfaRecord) -> UserMfaRecord:
        """新增用户记录（账户创建时调用）

        Returns:
            UserMfaRecord: 存储后的记录
        """
        pass


__all__ = ["MfaRecordStore"]
