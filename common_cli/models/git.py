"""Git 相关的值类型：Commit 与 git log 时间戳解析。"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

# 与 `git log --format=%ci` 的默认输出一致，如 2024-09-21 12:34:56 +0000
GIT_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def parse_git_log_date(value: str) -> datetime | None:
    """解析 git log 时间戳，失败返回 None。"""
    try:
        return datetime.strptime(value.strip(), GIT_LOG_DATE_FORMAT)
    except ValueError:
        return None


def format_git_log_date(value: datetime) -> str:
    """格式化为 git log 时间戳；naive datetime 按 UTC 处理。"""
    if value.tzinfo is None:
        return value.strftime("%Y-%m-%d %H:%M:%S") + " +0000"
    return value.strftime(GIT_LOG_DATE_FORMAT)


class Commit(BaseModel):
    """`git log --format="%H %ci"` 的一行。"""

    model_config = ConfigDict(frozen=True)

    hash: str
    date_string: str

    @property
    def date(self) -> datetime | None:
        return parse_git_log_date(self.date_string)

    @classmethod
    def parse_log_line(cls, line: str) -> Commit | None:
        parts = line.strip().split(" ", 1)
        if len(parts) != 2 or not parts[0] or not parts[1].strip():
            return None
        return cls(hash=parts[0], date_string=parts[1].strip())
