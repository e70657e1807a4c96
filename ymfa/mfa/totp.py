"""TOTP (Time-based One-Time Password)

RFC 4226 (HOTP) / RFC 6238 (TOTP) 的实现，兼容 Google Authenticator、
Microsoft Authenticator 等应用的默认参数：HMAC-SHA1、6 位、30 秒步长。

使用示例:
    secret = generate_secret()
    uri = build_provisioning_uri(secret, account="john@example.com", issuer="MyApp")

    code = generate_totp(secret)
    assert verify_totp(secret, code)
"""

import base64
import binascii
import hashlib
import hmac
import secrets
import struct
import time
from typing import Optional
from urllib.parse import quote

DEFAULT_DIGITS = 6
DEFAULT_TIME_STEP = 30
DEFAULT_WINDOW = 1
SECRET_BYTES = 20  # 160 bit


def generate_secret(num_bytes: int = SECRET_BYTES) -> str:
    """生成随机密钥

    Args:
        num_bytes: 随机字节数

    Returns:
        str: Base32 编码（大写、无填充）的密钥
    """
    random_bytes = secrets.token_bytes(num_bytes)
    return base64.b32encode(random_bytes).decode("ascii").rstrip("=")


def decode_secret(secret: str) -> bytes:
    """解码 Base32 密钥（不区分大小写，允许省略填充）

    Raises:
        ValueError: 密钥不是合法的 Base32
    """
    normalized = secret.strip().replace(" ", "").upper().rstrip("=")
    try:
        return base64.b32decode(normalized + "=" * (-len(normalized) % 8))
    except binascii.Error as e:
        raise ValueError("Invalid Base32 secret") from e


def hotp(secret: str, counter: int, digits: int = DEFAULT_DIGITS) -> str:
    """HOTP (HMAC-based One-Time Password)

    Args:
        secret: Base32 编码的密钥
        counter: 计数器（非负）
        digits: 密码位数

    Returns:
        str: 补零到 digits 位的一次性密码
    """
    key = decode_secret(secret)

    counter_bytes = struct.pack(">Q", counter)
    hmac_hash = hmac.new(key, counter_bytes, hashlib.sha1).digest()

    # 动态截断
    offset = hmac_hash[-1] & 0x0F
    truncated = struct.unpack(">I", hmac_hash[offset:offset + 4])[0]
    truncated &= 0x7FFFFFFF

    otp = truncated % (10 ** digits)
    return str(otp).zfill(digits)


def time_counter(timestamp: Optional[float] = None, time_step: int = DEFAULT_TIME_STEP) -> int:
    """时间戳对应的 TOTP 计数器（T0 = 0）"""
    if timestamp is None:
        timestamp = time.time()
    return int(timestamp) // time_step


def generate_totp(
    secret: str,
    timestamp: Optional[float] = None,
    time_step: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """生成 TOTP

    Args:
        secret: Base32 编码的密钥
        timestamp: Unix 时间戳（默认当前时间）
        time_step: 时间步长（秒）
        digits: 密码位数

    Returns:
        str: 一次性密码
    """
    return hotp(secret, time_counter(timestamp, time_step), digits)


def normalize_code(code: str) -> str:
    """去掉用户输入中的空格和连字符"""
    return code.replace(" ", "").replace("-", "").strip()


def verify_totp(
    secret: str,
    code: str,
    time_step: int = DEFAULT_TIME_STEP,
    digits: int = DEFAULT_DIGITS,
    window: int = DEFAULT_WINDOW,
    timestamp: Optional[float] = None,
) -> bool:
    """验证 TOTP

    在 [当前步 - window, 当前步 + window] 范围内逐一比较，
    比较使用 hmac.compare_digest。

    Args:
        secret: Base32 编码的密钥
        code: 待验证的代码
        time_step: 时间步长（秒）
        digits: 密码位数
        window: 允许的时间窗口（前后多少个时间步）
        timestamp: 时间戳（默认当前时间）

    Returns:
        bool: 是否验证通过
    """
    if code is None:
        return False
    code = normalize_code(str(code))
    # str.isdigit 也接受全角等 Unicode 数字
    if len(code) != digits or not (code.isascii() and code.isdigit()):
        return False

    counter = time_counter(timestamp, time_step)
    matched = False
    for offset in range(-window, window + 1):
        candidate = counter + offset
        if candidate < 0:
            continue
        # 不提前返回，每个候选都参与比较
        if hmac.compare_digest(code, hotp(secret, candidate, digits)):
            matched = True
    return matched


def build_provisioning_uri(secret: str, account: str, issuer: str) -> str:
    """构建 otpauth URI

    otpauth://totp/{issuer}:{account}?secret={secret}&issuer={issuer}

    issuer 与 account 做百分号编码，'@' 保留原样，
    常见的发行者名称和邮箱地址因此按原样出现。

    Args:
        secret: Base32 密钥
        account: 账户名（邮箱）
        issuer: 发行者名称

    Returns:
        str: otpauth URI
    """
    label_issuer = quote(issuer, safe="@")
    label_account = quote(account, safe="@")
    return (
        f"otpauth://totp/{label_issuer}:{label_account}"
        f"?secret={secret}&issuer={label_issuer}"
    )


__all__ = [
    "DEFAULT_DIGITS",
    "DEFAULT_TIME_STEP",
    "DEFAULT_WINDOW",
    "SECRET_BYTES",
    "generate_secret",
    "decode_secret",
    "hotp",
    "time_counter",
    "generate_totp",
    "normalize_code",
    "verify_totp",
    "build_provisioning_uri",
]
