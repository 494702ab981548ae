"""配置加载：从 YAML 读取 CommonCLIConfig，并据此构造基础 CommonShell。"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from common_cli.core.call_logger import CallLogger
from common_cli.core.shell import CommonShell
from common_cli.models.config import CommonCLIConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "COMMON_CLI_CONFIG"
DEFAULT_CONFIG_PATH = "common-cli.yaml"


def default_config_path() -> str:
    return os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def load_config(path: str | None = None) -> CommonCLIConfig:
    """读取 YAML 配置；文件不存在时返回默认配置并记录警告。

    YAML 格式错误或字段类型不符时直接抛出（yaml.YAMLError / pydantic.ValidationError）。
    """
    config_path = Path(path or default_config_path())
    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return CommonCLIConfig()

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    config = CommonCLIConfig(**data)
    logger.info(f"Loaded config: {config_path} ({len(config.tools)} tool overrides)")
    return config


def build_shell(config: CommonCLIConfig) -> CommonShell:
    """按配置构造基础 CommonShell；call_log_dir 设置时挂上 CallLogger。"""
    fields: dict = {
        "environment": dict(config.environment),
        "timeout": config.timeout,
    }
    if config.working_directory:
        fields["working_directory"] = config.working_directory
    if config.call_log_dir:
        fields["call_logger"] = CallLogger(config.call_log_dir)
    return CommonShell(**fields)
