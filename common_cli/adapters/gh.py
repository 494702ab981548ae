"""GitHub CLI（gh）Adapter：issue、label、repo、auth 子命令。

注意：这些方法假定当前工作目录就是目标仓库（或其子目录）。
"""

from __future__ import annotations

import logging
from typing import Iterable, TypeVar

from pydantic import TypeAdapter, ValidationError

from common_cli.adapters.base import BaseCLI, Versioned
from common_cli.core.shell import CommonShell
from common_cli.models.gh import (
    DETAIL_FIELDS,
    SUMMARY_FIELDS,
    GhDecodingError,
    GhIssue,
    GhIssueCreateOptions,
    GhIssueField,
    GhIssueIdentifier,
    GhIssueListOptions,
)
from common_cli.models.shell import Executable, HostKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _repeated(flag: str, values: Iterable[str]) -> list[str]:
    """把 ["a", "", "b"] 展开为 [flag, "a", flag, "b"]，跳过空串。"""
    args: list[str] = []
    for value in values:
        if value:
            args += [flag, value]
    return args


def _optional(flag: str, value: str | None) -> list[str]:
    return [flag, value] if value else []


def json_field_arguments(fields: Iterable[GhIssueField]) -> list[str]:
    """字段排序后以逗号拼接；空集合退回 SUMMARY_FIELDS。"""
    requested = set(fields) or set(SUMMARY_FIELDS)
    joined = ",".join(sorted(GhIssueField(f).value for f in requested))
    return ["--json", joined]


def decode_json(type_: type[T], output: str, command: list[str]) -> T:
    """解析 gh 的 JSON 输出；空输出或非法 JSON 抛 GhDecodingError。"""
    trimmed = output.strip()
    if not trimmed:
        raise GhDecodingError("empty", command, output)
    try:
        return TypeAdapter(type_).validate_json(trimmed)
    except ValidationError as e:
        logger.warning("gh: failed to decode output of %s: %s", " ".join(command), e)
        raise GhDecodingError("invalid_json", command, output, underlying=e) from e


class Gh(BaseCLI, Versioned):
    """gh 的轻量封装；构造时把 shell 绑定到 gh。"""

    executable = Executable.named("gh")

    def __init__(
        self,
        shell: CommonShell,
        executable: Executable | None = None,
        host: HostKind | None = None,
    ):
        super().__init__(shell, executable, host)
        self.shell = self.mutated_shell(shell)

    async def _run(self, args) -> str:
        return await self.shell.run(list(args))

    # ── issue ──

    async def issue_create(
        self,
        options: GhIssueCreateOptions,
        fields: Iterable[GhIssueField] = SUMMARY_FIELDS,
    ) -> GhIssue:
        args = ["issue", "create", "--title", options.title, "--body", options.body]
        args += _repeated("--label", options.labels)
        args += _optional("--milestone", options.milestone)
        args += _repeated("--assignee", options.assignees)
        args += _repeated("--project", options.projects)
        args += json_field_arguments(fields)
        output = await self._run(args)
        return decode_json(GhIssue, output, args)

    async def issue_add_labels(self, number: str, labels: list[str]) -> str:
        return await self._run(["issue", "edit", number, *_repeated("--add-label", labels)])

    async def issue_remove_labels(self, number: str, labels: list[str]) -> str:
        return await self._run(["issue", "edit", number, *_repeated("--remove-label", labels)])

    async def issue_add_assignees(self, number: str, assignees: list[str]) -> str:
        return await self._run(["issue", "edit", number, *_repeated("--add-assignee", assignees)])

    async def issue_remove_assignees(self, number: str, assignees: list[str]) -> str:
        return await self._run(["issue", "edit", number, *_repeated("--remove-assignee", assignees)])

    async def issue_close(self, number: str, comment: str | None = None) -> str:
        return await self._run(["issue", "close", number, *_optional("--comment", comment)])

    async def issue_reopen(self, number: str) -> str:
        return await self._run(["issue", "reopen", number])

    async def issue_comment(self, number: str, body: str) -> str:
        return await self._run(["issue", "comment", number, "--body", body])

    async def issue_view(
        self,
        identifier: GhIssueIdentifier,
        fields: Iterable[GhIssueField] = DETAIL_FIELDS,
    ) -> GhIssue:
        args = ["issue", "view", identifier.raw_value, *json_field_arguments(fields)]
        output = await self._run(args)
        return decode_json(GhIssue, output, args)

    async def issue_list(
        self,
        options: GhIssueListOptions | None = None,
        fields: Iterable[GhIssueField] = SUMMARY_FIELDS,
    ) -> list[GhIssue]:
        options = options or GhIssueListOptions()
        args = ["issue", "list", "--state", options.state]
        args += _repeated("--label", options.labels)
        args += _optional("--author", options.author)
        args += _optional("--assignee", options.assignee)
        args += _optional("--milestone", options.milestone)
        args += _optional("--search", options.search_query)
        if options.limit is not None:
            args += ["--limit", str(options.limit)]
        args += _optional("--mention", options.mention)
        args += _optional("--app", options.app)
        args += json_field_arguments(fields)
        output = await self._run(args)
        return decode_json(list[GhIssue], output, args)

    # ── label ──

    async def label_list(self) -> str:
        return await self._run(["label", "list"])

    async def label_create(self, name: str, color: str | None = None, description: str | None = None) -> str:
        """color 为不带 # 的十六进制串。"""
        args = ["label", "create", name]
        args += _optional("--color", color)
        args += _optional("--description", description)
        return await self._run(args)

    async def label_update(
        self,
        current_name: str,
        new_name: str | None = None,
        color: str | None = None,
        description: str | None = None,
    ) -> str:
        args = ["label", "edit", current_name]
        args += _optional("--name", new_name)
        args += _optional("--color", color)
        args += _optional("--description", description)
        return await self._run(args)

    async def label_delete(self, name: str, confirm: bool = True) -> str:
        args = ["label", "delete", name]
        if confirm:
            args.append("--yes")
        return await self._run(args)

    # ── repo / auth ──

    async def repo_view(self, fields: list[str] | None = None) -> str:
        args = ["repo", "view"]
        if fields:
            args += ["--json", ",".join(fields)]
        return await self._run(args)

    async def auth_status(self) -> str:
        # 不加 --show-token
        return await self._run(["auth", "status"])
