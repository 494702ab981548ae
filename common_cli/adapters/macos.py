"""macOS 开发与系统工具：pkgbuild、sdef、xcodebuild、launchctl、ibtool。

这些 Adapter 在其他平台上可以构造并拼参数，只是执行时找不到对应程序。
"""

from __future__ import annotations

import os
from typing import Sequence

from pydantic import BaseModel, ConfigDict

from common_cli.adapters.base import BaseCLI, Versioned
from common_cli.core.shell import CommonShell
from common_cli.models.shell import Executable, HostKind


class Pkgbuild(BaseCLI):
    """/usr/bin/pkgbuild 的最小封装，直接执行（direct）。"""

    executable = Executable.at_path("/usr/bin/pkgbuild")

    def __init__(
        self,
        shell: CommonShell,
        executable: Executable | None = None,
        host: HostKind | None = None,
    ):
        super().__init__(shell, executable, host)
        self.shell = self.mutated_shell(shell)

    async def build(
        self,
        component_path: str,
        identifier: str,
        version: str,
        install_location: str,
        output: str,
        scripts: str | None = None,
    ) -> str:
        args = [
            "--root", component_path,
            "--identifier", identifier,
            "--version", version,
            "--install-location", install_location,
            "--component-plist", "/dev/null",
            "--quiet",
            output,
        ]
        if scripts is not None:
            args = ["--scripts", scripts, *args]
        return await self.shell.run(args)


class Sdef(BaseCLI):
    """通过 /usr/bin/sdef 提取应用的 AppleScript 术语定义。"""

    executable = Executable.at_path("/usr/bin/sdef")

    async def extract(self, app_path: str) -> str:
        return await self._run([app_path])


class XcodeBuild(BaseCLI):
    executable = Executable.named("xcodebuild")

    async def list_workspace_json(self, workspace: str) -> str:
        """列出 workspace 的 scheme，返回原始 JSON 文本。"""
        return await self._run(["-list", "-json", "-workspace", workspace])

    async def list_workspace_text(self, workspace: str) -> str:
        return await self._run(["-list", "-workspace", workspace])

    async def build(
        self,
        workspace: str,
        scheme: str,
        destination: str,
        configuration: str = "Debug",
        extra: Sequence[str] = (),
    ) -> str:
        args = [
            "-workspace", workspace,
            "-scheme", scheme,
            "-destination", destination,
            "-configuration", configuration,
            "-quiet",
            "-skipPackagePluginValidation",
            "build",
            *extra,
        ]
        return await self._run(args)

    async def clean(self, workspace: str, scheme: str) -> str:
        return await self._run(["-workspace", workspace, "-scheme", scheme, "clean"])


class LaunchctlDomain(BaseModel):
    """launchctl 的目标域：system、gui/<uid>、user/<uid>、login/<uuid>。"""

    model_config = ConfigDict(frozen=True)

    raw: str

    @classmethod
    def system(cls) -> LaunchctlDomain:
        return cls(raw="system")

    @classmethod
    def gui(cls, uid: int) -> LaunchctlDomain:
        return cls(raw=f"gui/{uid}")

    @classmethod
    def user(cls, uid: int) -> LaunchctlDomain:
        return cls(raw=f"user/{uid}")

    @classmethod
    def login(cls, uuid: str) -> LaunchctlDomain:
        return cls(raw=f"login/{uuid}")

    @classmethod
    def current_gui(cls) -> LaunchctlDomain:
        return cls.gui(os.getuid())

    @classmethod
    def current_user(cls) -> LaunchctlDomain:
        return cls.user(os.getuid())

    def target(self, label: str) -> str:
        return f"{self.raw}/{label}"


class Launchctl(BaseCLI, Versioned):
    """launchctl；旧式 load/unload 与基于 domain 的新式命令都支持。"""

    executable = Executable.named("launchctl")

    async def version(self) -> str:
        # launchctl 用子命令 version 而非 --version
        return await self._run(["version"])

    async def load(self, plist_path: str) -> str:
        return await self._run(["load", "-w", plist_path])

    async def unload(self, plist_path: str) -> str:
        return await self._run(["unload", plist_path])

    # 当前 GUI 用户

    async def bootstrap_user(self, plist_path: str) -> str:
        return await self.bootstrap(LaunchctlDomain.current_gui(), plist_path)

    async def bootout_user(self, plist_path: str) -> str:
        return await self.bootout(LaunchctlDomain.current_gui(), plist_path)

    async def kickstart_user(self, label: str) -> str:
        return await self.kickstart(LaunchctlDomain.current_gui(), label)

    async def print_user(self, label: str) -> str:
        return await self.print_domain(LaunchctlDomain.current_gui(), label)

    # 指定 domain

    async def bootstrap(self, domain: LaunchctlDomain, plist_path: str) -> str:
        return await self._run(["bootstrap", domain.raw, plist_path])

    async def bootout(self, domain: LaunchctlDomain, plist_path: str) -> str:
        return await self._run(["bootout", domain.raw, plist_path])

    async def kickstart(self, domain: LaunchctlDomain, label: str, restart: bool = False) -> str:
        args = ["kickstart"]
        if restart:
            args.append("-k")
        args.append(domain.target(label))
        return await self._run(args)

    async def enable(self, domain: LaunchctlDomain, label: str) -> str:
        return await self._run(["enable", domain.target(label)])

    async def disable(self, domain: LaunchctlDomain, label: str) -> str:
        return await self._run(["disable", domain.target(label)])

    async def print_domain(self, domain: LaunchctlDomain, label: str | None = None) -> str:
        target = domain.target(label) if label is not None else domain.raw
        return await self._run(["print", target])


class Ibtool(BaseCLI):
    """Interface Builder 工具：从 xib/storyboard 导出 .strings。"""

    executable = Executable.at_path("/usr/bin/ibtool")

    async def generate_strings(self, asset_path: str, strings_path: str) -> str:
        return await self._run([asset_path, "--generate-strings-file", strings_path])
