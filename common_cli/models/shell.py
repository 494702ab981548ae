"""执行相关的值类型：Executable、HostKind、CommandSpec、ProcessOutput。

Adapter 只描述「跑哪个程序、带什么参数」，具体如何拼成 argv 由 HostKind 决定：
- direct：直接执行可执行文件路径
- env：经 /usr/bin/env 按 PATH 查找
- shell：交给 /bin/sh -c 执行整行命令
- npm / npx：由 npm / npx 作为启动器
"""

from __future__ import annotations

import shlex
from typing import Literal

from pydantic import BaseModel, Field

ENV_PATH = "/usr/bin/env"
SH_PATH = "/bin/sh"


class Executable(BaseModel):
    """可执行文件标识：按名称（PATH 查找）、按路径，或不指定（纯 shell 命令）。"""

    kind: Literal["name", "path", "none"] = "none"
    value: str = ""

    @classmethod
    def named(cls, name: str) -> Executable:
        return cls(kind="name", value=name)

    @classmethod
    def at_path(cls, path: str) -> Executable:
        return cls(kind="path", value=path)

    @classmethod
    def none(cls) -> Executable:
        return cls(kind="none", value="")

    @property
    def is_none(self) -> bool:
        return self.kind == "none" or not self.value

    def __str__(self) -> str:
        return self.value or "<none>"


class HostKind(BaseModel):
    """启动方式及其附加参数（如 env 的 -i、sh 的 -e）。"""

    kind: Literal["direct", "env", "shell", "npm", "npx"] = "direct"
    options: list[str] = Field(default_factory=list)

    @classmethod
    def direct(cls) -> HostKind:
        return cls(kind="direct")

    @classmethod
    def env(cls, options: list[str] | None = None) -> HostKind:
        return cls(kind="env", options=options or [])

    @classmethod
    def shell(cls, options: list[str] | None = None) -> HostKind:
        return cls(kind="shell", options=options or [])

    @classmethod
    def npm(cls, options: list[str] | None = None) -> HostKind:
        return cls(kind="npm", options=options or [])

    @classmethod
    def npx(cls, options: list[str] | None = None) -> HostKind:
        return cls(kind="npx", options=options or [])


def preferred_host(executable: Executable) -> HostKind:
    """按可执行文件类型选择默认启动方式：path → direct，name → env，none → shell。"""
    if executable.kind == "path":
        return HostKind.direct()
    if executable.kind == "name":
        return HostKind.env()
    return HostKind.shell()


def build_argv(host: HostKind, executable: Executable, arguments: list[str]) -> list[str]:
    """把 host + executable + arguments 组装成最终交给操作系统的 argv。"""
    args = list(arguments)

    if host.kind in ("direct", "env"):
        if executable.is_none:
            raise ValueError(f"host '{host.kind}' requires an executable")
        if host.kind == "direct":
            return [executable.value, *args]
        return [ENV_PATH, *host.options, executable.value, *args]

    if host.kind == "shell":
        words = args if executable.is_none else [executable.value, *args]
        # 没有可执行文件时，参数本身就是完整命令行（如 "echo bench"）
        command = " ".join(words) if executable.is_none else shlex.join(words)
        return [SH_PATH, *host.options, "-c", command]

    launcher = host.kind
    prefix = [] if executable.is_none or executable.value == launcher else [executable.value]
    return [launcher, *host.options, *prefix, *args]


class CommandSpec(BaseModel):
    """尚未执行的类型化命令：可执行文件、参数与工作目录。"""

    executable: Executable
    args: list[str] = Field(default_factory=list)
    working_directory: str = ""


class ProcessOutput(BaseModel):
    """一次子进程执行的完整结果，不因非零退出码抛错。"""

    argv: list[str] = Field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0
