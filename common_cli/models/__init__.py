"""统一导出执行、Git、gh 与配置相关的数据模型。"""
from common_cli.models.config import CommonCLIConfig, ToolConfig
from common_cli.models.gh import (
    DETAIL_FIELDS,
    SUMMARY_FIELDS,
    GhActor,
    GhDecodingError,
    GhIssue,
    GhIssueCreateOptions,
    GhIssueField,
    GhIssueIdentifier,
    GhIssueListOptions,
    GhLabel,
    GhMilestone,
)
from common_cli.models.git import Commit, format_git_log_date, parse_git_log_date
from common_cli.models.shell import CommandSpec, Executable, HostKind, ProcessOutput, preferred_host

__all__ = [
    "CommandSpec",
    "Executable",
    "HostKind",
    "ProcessOutput",
    "preferred_host",
    "Commit",
    "parse_git_log_date",
    "format_git_log_date",
    "GhActor",
    "GhDecodingError",
    "GhIssue",
    "GhIssueCreateOptions",
    "GhIssueField",
    "GhIssueIdentifier",
    "GhIssueListOptions",
    "GhLabel",
    "GhMilestone",
    "SUMMARY_FIELDS",
    "DETAIL_FIELDS",
    "CommonCLIConfig",
    "ToolConfig",
]
