"""配置模块

提供配置管理功能：
- AppSettings: 应用基础配置，支持 YAML + 环境变量
- 子配置类: MFASettings, LoggingSettings, DatabaseSettings
- ConfigLoader / load_yaml_config: YAML 配置加载

快速开始:
    from ymfa.config import AppSettings, load_yaml_config

    settings = load_yaml_config("config/settings.yaml", AppSettings)

配置优先级: 显式参数（YAML 内容） > 环境变量 > 默认值
"""

from .settings import (
    AppSettings,
    MFASettings,
    LoggingSettings,
    DatabaseSettings,
)

from .loader import (
    ConfigLoader,
    load_yaml_config,
)

__all__ = [
    "AppSettings",
    "MFASettings",
    "LoggingSettings",
    "DatabaseSettings",
    "ConfigLoader",
    "load_yaml_config",
]
