"""日志模块

提供日志配置与管理、敏感数据过滤。

使用示例:
    from ymfa.log import setup_logger, get_logger, log_filter_hook_manager

    logger = setup_logger("ymfa", level="DEBUG", log_file="logs/mfa.log")

    # 过滤字典数据中的敏感字段
    filtered_data = log_filter_hook_manager.apply_filters(log_data)
"""

from .logger import (
    setup_logger,
    setup_root_logger,
    create_formatter,
    MicrosecondFormatter,
    DEFAULT_LOG_FORMAT,
    logger,
    get_logger,
)

from .filter_hooks import (
    LogFilterHook,
    SensitiveDataFilterHook,
    SensitiveLogFilter,
    LogFilterHookManager,
    log_filter_hook_manager,
    DEFAULT_SENSITIVE_PATTERNS,
    DEFAULT_SENSITIVE_TEXT_PATTERNS,
    FILTERED_PLACEHOLDER,
)

__all__ = [
    # 日志工具
    "setup_logger",
    "setup_root_logger",
    "create_formatter",
    "MicrosecondFormatter",
    "DEFAULT_LOG_FORMAT",
    "logger",
    "get_logger",

    # 日志过滤钩子
    "LogFilterHook",
    "SensitiveDataFilterHook",
    "SensitiveLogFilter",
    "LogFilterHookManager",
    "log_filter_hook_manager",
    "DEFAULT_SENSITIVE_PATTERNS",
    "DEFAULT_SENSITIVE_TEXT_PATTERNS",
    "FILTERED_PLACEHOLDER",
]
