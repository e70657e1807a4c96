"""恢复码

恢复码是一次性令牌，在用户无法使用 Authenticator 时作为备用凭证。
每个恢复码为 UUID v4 字符串（122 bit 随机数）。

使用示例:
    codes = generate_recovery_codes()
    # ['3f0c2b9e-...', ...] 共 10 个
"""

import uuid
from typing import List

DEFAULT_RECOVERY_CODE_COUNT = 10


def generate_recovery_codes(count: int = DEFAULT_RECOVERY_CODE_COUNT) -> List[str]:
    """生成恢复码

    Args:
        count: 数量

    Returns:
        List[str]: 互不相同的恢复码列表
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    codes: List[str] = []
    seen = set()
    while len(codes) < count:
        code = str(uuid.uuid4())
        if code in seen:
            continue
        seen.add(code)
        codes.append(code)
    return codes


__all__ = [
    "DEFAULT_RECOVERY_CODE_COUNT",
    "generate_recovery_codes",
]
