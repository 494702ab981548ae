"""工具注册表：工具名 -> Adapter 类，按配置覆盖可执行文件与启动方式后实例化。

Toolbox 在此之上提供属性式访问：toolbox.git、toolbox.rm.native。
"""

from __future__ import annotations

import logging

from common_cli.adapters.base import BaseCLI
from common_cli.adapters.gh import Gh
from common_cli.adapters.git import Git
from common_cli.adapters.macos import Ibtool, Launchctl, Pkgbuild, Sdef, XcodeBuild
from common_cli.adapters.npm import Npm
from common_cli.adapters.swift import Swiftc, Swiftlint, SwiftTool
from common_cli.adapters.system import (
    Cat,
    Chmod,
    Cp,
    Du,
    Echo,
    Id,
    Ls,
    Mkdir,
    Pwd,
    Readlink,
    Rm,
    Rsync,
    Touch,
)
from common_cli.core.shell import CommonShell
from common_cli.models.config import CommonCLIConfig, ToolConfig

logger = logging.getLogger(__name__)

BUILTIN_TOOLS: dict[str, type[BaseCLI]] = {
    "cat": Cat,
    "chmod": Chmod,
    "cp": Cp,
    "du": Du,
    "echo": Echo,
    "id": Id,
    "ls": Ls,
    "mkdir": Mkdir,
    "pwd": Pwd,
    "readlink": Readlink,
    "rm": Rm,
    "rsync": Rsync,
    "touch": Touch,
    "git": Git,
    "gh": Gh,
    "swift": SwiftTool,
    "swiftc": Swiftc,
    "swiftlint": Swiftlint,
    "npm": Npm,
    "pkgbuild": Pkgbuild,
    "sdef": Sdef,
    "xcodebuild": XcodeBuild,
    "launchctl": Launchctl,
    "ibtool": Ibtool,
}


class ToolRegistry:
    """内存中的工具表：name -> Adapter 类，默认包含全部内置工具。"""

    def __init__(self, config: CommonCLIConfig | None = None, include_builtins: bool = True):
        self.tools: dict[str, type[BaseCLI]] = dict(BUILTIN_TOOLS) if include_builtins else {}
        self.overrides: dict[str, ToolConfig] = dict(config.tools) if config else {}
        for name in self.overrides:
            if name not in self.tools:
                logger.warning(f"Config overrides unknown tool: {name}")

    def register(self, name: str, adapter: type[BaseCLI]) -> None:
        """注册一个 Adapter 类；同名会覆盖。"""
        self.tools[name] = adapter
        logger.info(f"Registered tool: {name} -> {adapter.__name__}")

    def unregister(self, name: str) -> None:
        if name in self.tools:
            del self.tools[name]
            logger.info(f"Unregistered tool: {name}")

    def get(self, name: str) -> type[BaseCLI]:
        """按名称取 Adapter 类；不存在则抛 KeyError。"""
        if name not in self.tools:
            raise KeyError(f"Tool not found: {name}")
        return self.tools[name]

    def list_tools(self) -> list[str]:
        return sorted(self.tools)

    def create(self, name: str, shell: CommonShell) -> BaseCLI:
        """实例化 Adapter，并应用配置里该工具的 executable_path / host 覆盖。"""
        adapter_cls = self.get(name)
        override = self.overrides.get(name)
        if override is None:
            return adapter_cls(shell)
        return adapter_cls(shell, executable=override.executable(), host=override.host_kind())


class Toolbox:
    """把注册表里的工具绑定到同一个 CommonShell，按属性名访问。"""

    def __init__(self, shell: CommonShell, registry: ToolRegistry | None = None):
        self.shell = shell
        self.registry = registry or ToolRegistry()
        self._cache: dict[str, BaseCLI] = {}

    def __getattr__(self, name: str) -> BaseCLI:
        if name.startswith("_"):
            raise AttributeError(name)
        if name not in self._cache:
            try:
                self._cache[name] = self.registry.create(name, self.shell)
            except KeyError:
                raise AttributeError(f"No tool registered as {name!r}") from None
        return self._cache[name]

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self.registry.list_tools()))
