"""按版本号比较后写入的重试循环

读取记录 -> 计算新记录 -> update_user(expected_version=读取时版本)。
版本冲突时重新读取并重新计算，转换规则因此总是基于最新的记录判断。
"""

from typing import TYPE_CHECKING, Any, Callable, Optional, Tuple, TypeVar

from ymfa.log import get_logger

from .base import UserMfaRecord
from .exceptions import StaleRecordError

if TYPE_CHECKING:
    from ymfa.store.base import MfaRecordStore

logger = get_logger()

T = TypeVar("T")

# 返回 (新记录, 结果)；新记录为 None 表示无需写入
Step = Callable[[UserMfaRecord], Tuple[Optional[UserMfaRecord], T]]


def update_with_retry(
    store: "MfaRecordStore",
    user_id: Any,
    step: Step,
    max_retries: int = 3,
) -> T:
    """执行一次带重试的读-改-写

    Args:
        store: 记录存储
        user_id: 用户 ID
        step: 基于当前记录计算新记录的函数，抛出的异常原样向上传递
        max_retries: 版本冲突后的最大重试次数

    Returns:
        step 返回的结果

    Raises:
        StaleRecordError: 重试次数用尽
    """
    attempt = 0
    while True:
        record = store.get_user(user_id)
        new_record, result = step(record)
        if new_record is None:
            return result
        try:
            store.update_user(user_id, new_record, expected_version=record.version)
            return result
        except StaleRecordError:
            if attempt >= max_retries:
                logger.warning(
                    f"Giving up MFA update for user {user_id} after {attempt + 1} attempts"
                )
                raise
            attempt += 1
            logger.debug(f"Retrying MFA update for user {user_id} (attempt {attempt + 1})")


__all__ = ["update_with_retry"]
