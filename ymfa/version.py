"""版本信息"""

__version__ = "0.1.0"
__author__ = "ymfa"
__description__ = "TOTP 多因素认证核心：密钥发放、激活、校验与禁用"
