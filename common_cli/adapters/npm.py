"""npm Adapter：通过 npm 启动器执行 exec / run。"""

from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel, Field, field_validator

from common_cli.adapters.base import BaseCLI, Versioned
from common_cli.models.shell import Executable, HostKind


class NpmExecOptions(BaseModel):
    """`npm exec [--yes] [--package <p>]... -- <command> [args...]`"""

    package_names: list[str] = Field(default_factory=list)
    command: str
    arguments: list[str] = Field(default_factory=list)
    yes: bool = True

    @field_validator("command")
    @classmethod
    def _command_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Command must not be empty")
        return v

    @field_validator("package_names")
    @classmethod
    def _drop_blank_packages(cls, v: list[str]) -> list[str]:
        return [p for p in v if p.strip()]

    def make_arguments(self) -> list[str]:
        args = ["exec"]
        if self.yes:
            args.append("--yes")
        for name in self.package_names:
            args += ["--package", name]
        # -- 之后的参数交给包内可执行文件，而不是 npm 本身
        args.append("--")
        args.append(self.command)
        args.extend(self.arguments)
        return args


class NpmRunOptions(BaseModel):
    """`npm run [--if-present] [--silent] <script> [-- args...]`"""

    script_name: str
    arguments: list[str] = Field(default_factory=list)
    if_present: bool = False
    silent: bool = False

    @field_validator("script_name")
    @classmethod
    def _script_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Script name must not be empty")
        return v

    def make_arguments(self) -> list[str]:
        args = ["run"]
        if self.if_present:
            args.append("--if-present")
        if self.silent:
            args.append("--silent")
        args.append(self.script_name)
        if self.arguments:
            args.append("--")
            args.extend(self.arguments)
        return args


class Npm(BaseCLI, Versioned):
    """npm 封装；总是经由 npm 启动器（HostKind.npm）执行。"""

    executable = Executable.named("npm")
    host = HostKind.npm()

    async def run(self, arguments: Sequence[str]) -> str:
        return await self._run(arguments)

    async def exec(self, options: NpmExecOptions) -> str:
        return await self.run(options.make_arguments())

    async def run_script(self, options: NpmRunOptions) -> str:
        return await self.run(options.make_arguments())
