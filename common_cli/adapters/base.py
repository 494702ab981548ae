"""BaseCLI：所有命令行工具 Adapter 的基类。"""

from __future__ import annotations

from typing import ClassVar, Sequence

from common_cli.core.shell import CommonShell
from common_cli.models.shell import Executable, HostKind, preferred_host


class BaseCLI:
    """所有 CLI Adapter 的基类。

    每个 Adapter 负责：
    1. 声明自己包装的可执行文件（executable）
    2. 把类型化的方法参数组装成 argv
    3. 交给注入的 CommonShell 执行，返回 stdout
    """

    executable: ClassVar[Executable] = Executable.none()
    # 非 None 时覆盖 preferred_host（如 npm 走 npm 启动器）
    host: ClassVar[HostKind | None] = None

    def __init__(
        self,
        shell: CommonShell,
        executable: Executable | None = None,
        host: HostKind | None = None,
    ):
        self.shell = shell
        # 实例级覆盖（例如配置文件里把 git 指向 /opt/homebrew/bin/git）
        if executable is not None:
            self.executable = executable
        if host is not None:
            self.host = host

    def mutated_shell(self, shell: CommonShell) -> CommonShell:
        """把 shell 绑定到本工具的 executable：path → direct，name → env，none → shell。

        使用实例上的 executable / host，构造时传入的覆盖同样生效。
        """
        return shell.configured(self.executable, host=self.host or preferred_host(self.executable))

    async def _run(self, args: Sequence[str]) -> str:
        return await self.shell.run_configured(self.executable, list(args), host=self.host)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(executable={self.executable.value!r})"


class Versioned:
    """可选 mixin：支持 --version 的工具。"""

    async def version(self) -> str:
        """执行 `<tool> --version` 并返回输出。"""
        return await self._run(["--version"])  # type: ignore[attr-defined]
