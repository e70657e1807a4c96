"""日志过滤钩子模块

提供日志数据的过滤功能，用于：
- 过滤 MFA 密钥、恢复码、otpauth URI 等敏感数据
- 自定义日志过滤规则

TOTP 密钥和恢复码一旦进入日志就等同于泄露，所以 ymfa 的所有日志器
在 setup_logger 时都会挂上 SensitiveLogFilter，再经过这里注册的钩子。

使用示例:
    from ymfa.log import (
        log_filter_hook_manager,
        SensitiveDataFilterHook,
    )

    # 使用默认配置（已自动注册敏感数据过滤器）
    filtered_data = log_filter_hook_manager.apply_filters(log_data)

    # 自定义敏感字段模式
    custom_hook = SensitiveDataFilterHook(
        sensitive_patterns=[r'.*phone.*'],
    )
    log_filter_hook_manager.register_hook(custom_hook)
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, Any, List

# 默认敏感字段名模式
DEFAULT_SENSITIVE_PATTERNS = [
    r'.*(password|pwd|passwd).*',
    r'.*(token|access_token|refresh_token).*',
    r'.*(secret|mfa_secret|apikey|api_key).*',
    r'.*(recovery_code|recovery_codes|recoverycodes).*',
    r'.*(otpauth|provisioning_uri|qr_code).*',
]

# 出现在消息文本中的敏感片段
DEFAULT_SENSITIVE_TEXT_PATTERNS = [
    r'otpauth://\S+',
    r'(?i)(secret=)[A-Z2-7=]+',
]

FILTERED_PLACEHOLDER = "*SENSITIVE DATA FILTERED*"


class LogFilterHook(ABC):
    """日志过滤钩子抽象基类

    继承此类可以自定义日志过滤逻辑。

    使用示例:
        class DropEmailHook(LogFilterHook):
            def should_apply(self, log_data: Dict[str, Any]) -> bool:
                return 'email' in log_data

            def filter(self, log_data: Dict[str, Any]) -> Dict[str, Any]:
                filtered = log_data.copy()
                filtered['email'] = '***'
                return filtered

        log_filter_hook_manager.register_hook(DropEmailHook())
    """

    @abstractmethod
    def should_apply(self, log_data: Dict[str, Any]) -> bool:
        """判断是否应该应用此过滤器

        Args:
            log_data: 日志数据

        Returns:
            bool: 是否应该应用此过滤器
        """
        pass

    @abstractmethod
    def filter(self, log_data: Dict[str, Any]) -> Dict[str, Any]:
        """过滤日志数据

        Args:
            log_data: 日志数据

        Returns:
            Dict[str, Any]: 过滤后的日志数据
        """
        pass


class SensitiveDataFilterHook(LogFilterHook):
    """敏感数据过滤器

    根据字段名模式过滤敏感数据，支持嵌套字典和列表的递归过滤。

    Args:
        sensitive_patterns: 敏感字段名模式列表（正则表达式）
    """

    def __init__(self, sensitive_patterns: List[str] = None):
        self.sensitive_patterns = (
            sensitive_patterns if sensitive_patterns is not None else DEFAULT_SENSITIVE_PATTERNS
        )
        # 编译正则表达式以提高性能
        self.compiled_patterns = [
            re.compile(pattern, re.IGNORECASE)
            for pattern in self.sensitive_patterns
        ]

    def should_apply(self, log_data: Dict[str, Any]) -> bool:
        """总是应用此过滤器"""
        return True

    def filter(self, log_data: Dict[str, Any]) -> Dict[str, Any]:
        """过滤敏感数据"""
        return self._filter_sensitive_fields_in_dict(log_data)

    def _is_sensitive_key(self, key: Any) -> bool:
        return any(pattern.search(str(key)) for pattern in self.compiled_patterns)

    def _filter_sensitive_fields_in_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """在字典中过滤敏感字段，只将敏感字段的值替换为占位符"""
        filtered_data = {}
        for key, value in data.items():
            if self._is_sensitive_key(key):
                filtered_data[key] = FILTERED_PLACEHOLDER
            elif isinstance(value, dict):
                filtered_data[key] = self._filter_sensitive_fields_in_dict(value)
            elif isinstance(value, (list, tuple)):
                filtered_data[key] = self._filter_sensitive_fields_in_list(value)
            else:
                filtered_data[key] = value
        return filtered_data

    def _filter_sensitive_fields_in_list(self, data) -> List[Any]:
        """在列表中过滤敏感字段"""
        filtered_data = []
        for item in data:
            if isinstance(item, dict):
                filtered_data.append(self._filter_sensitive_fields_in_dict(item))
            elif isinstance(item, (list, tuple)):
                filtered_data.append(self._filter_sensitive_fields_in_list(item))
            else:
                filtered_data.append(item)
        return filtered_data


class LogFilterHookManager:
    """日志过滤钩子管理器

    单例模式，管理所有已注册的日志过滤钩子。

    使用示例:
        from ymfa.log import log_filter_hook_manager

        log_filter_hook_manager.register_hook(MyCustomHook())
        filtered_log = log_filter_hook_manager.apply_filters(raw_log_data)
        log_filter_hook_manager.unregister_hook(my_hook)
    """

    _instance = None
    _hooks: List[LogFilterHook] = []

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(LogFilterHookManager, cls).__new__(cls)
            cls._hooks = []
        return cls._instance

    @classmethod
    def register_hook(cls, hook: LogFilterHook):
        """注册日志过滤钩子"""
        cls._hooks.append(hook)

    @classmethod
    def unregister_hook(cls, hook: LogFilterHook):
        """注销日志过滤钩子"""
        if hook in cls._hooks:
            cls._hooks.remove(hook)

    @classmethod
    def clear_hooks(cls):
        """清除所有已注册的钩子"""
        cls._hooks.clear()

    @classmethod
    def get_hooks(cls) -> List[LogFilterHook]:
        """获取所有已注册的钩子"""
        return cls._hooks.copy()

    @classmethod
    def apply_filters(cls, log_data: Dict[str, Any]) -> Dict[str, Any]:
        """应用所有已注册的过滤器

        Args:
            log_data: 原始日志数据

        Returns:
            Dict[str, Any]: 过滤后的日志数据
        """
        filtered_data = log_data.copy()
        for hook in cls._hooks:
            if hook.should_apply(filtered_data):
                filtered_data = hook.filter(filtered_data)
        return filtered_data


class SensitiveLogFilter(logging.Filter):
    """挂在 Handler 上的敏感数据过滤器

    - 字典形式的 args（logger.info("%(user_id)s", {...})）交给钩子管理器过滤
    - 渲染后的消息文本中的 otpauth URI 和 secret= 参数被替换

    过滤器只改写 record，不会丢弃日志。
    """

    def __init__(self, text_patterns: List[str] = None, manager: LogFilterHookManager = None):
        super().__init__()
        patterns = text_patterns if text_patterns is not None else DEFAULT_SENSITIVE_TEXT_PATTERNS
        self._text_patterns = [re.compile(p) for p in patterns]
        self._manager = manager or log_filter_hook_manager

    def redact_text(self, text: str) -> str:
        """替换文本中的敏感片段"""
        for pattern in self._text_patterns:
            if pattern.groups:
                text = pattern.sub(lambda m: m.group(1) + FILTERED_PLACEHOLDER, text)
            else:
                text = pattern.sub(FILTERED_PLACEHOLDER, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, dict) and record.args:
            record.args = self._manager.apply_filters(record.args)
        message = record.getMessage()
        redacted = self.redact_text(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


# 创建全局实例
log_filter_hook_manager = LogFilterHookManager()

# 注册默认的敏感数据过滤器
log_filter_hook_manager.register_hook(SensitiveDataFilterHook())
