"""日志配置：把 --log-level 之类的用户输入映射到 logging 级别，并统一根日志格式。"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

_LEVELS = {
    "silent": logging.ERROR,
    "error": logging.ERROR,
    "err": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "information": logging.INFO,
    "debug": logging.DEBUG,
    "verbose": logging.DEBUG,
    "trace": logging.DEBUG,
}


def parse_log_level(raw: str) -> int | None:
    """解析日志级别字符串（大小写、首尾空白不敏感）；无法识别时返回 None。"""
    return _LEVELS.get(raw.strip().lower())


def configure_logging(level: int = logging.INFO) -> None:
    """配置根日志格式与级别；重复调用只调整级别。"""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)


def configure_logging_from(raw_level: str | None) -> int:
    """按用户给出的字符串配置日志，解析失败时退回 INFO；返回实际使用的级别。"""
    level = parse_log_level(raw_level) if raw_level else None
    if level is None:
        level = logging.INFO
    configure_logging(level)
    return level
