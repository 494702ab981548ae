"""common-cli：常用命令行工具的类型化异步 Adapter。

典型用法::

    shell = CommonShell()
    branch = await Git(shell).current_branch()
    listing = await Ls(shell).native.list()
"""
from common_cli.adapters import (
    BaseCLI,
    Cat,
    Chmod,
    Cp,
    Du,
    Echo,
    Gh,
    Git,
    Id,
    Ls,
    Mkdir,
    Npm,
    Pwd,
    Readlink,
    Rm,
    Rsync,
    SwiftTool,
    Swiftc,
    Swiftlint,
    Touch,
    Versioned,
)
from common_cli.core.config_loader import build_shell, load_config
from common_cli.core.shell import CommonShell, ShellError, ShellTimeoutError
from common_cli.models.shell import CommandSpec, Executable, HostKind, ProcessOutput
from common_cli.registry import Toolbox, ToolRegistry

__version__ = "0.1.0"

__all__ = [
    "BaseCLI",
    "Versioned",
    "Cat",
    "Chmod",
    "Cp",
    "Du",
    "Echo",
    "Gh",
    "Git",
    "Id",
    "Ls",
    "Mkdir",
    "Npm",
    "Pwd",
    "Readlink",
    "Rm",
    "Rsync",
    "SwiftTool",
    "Swiftc",
    "Swiftlint",
    "Touch",
    "CommonShell",
    "ShellError",
    "ShellTimeoutError",
    "CommandSpec",
    "Executable",
    "HostKind",
    "ProcessOutput",
    "Toolbox",
    "ToolRegistry",
    "build_shell",
    "load_config",
]
