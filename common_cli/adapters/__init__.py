"""CLI Adapter：BaseCLI 基类，系统工具、Git/Gh、Swift、npm 与 macOS 工具的实现。"""
from common_cli.adapters.base import BaseCLI, Versioned
from common_cli.adapters.gh import Gh
from common_cli.adapters.git import Git, RebaseOption
from common_cli.adapters.macos import Ibtool, Launchctl, LaunchctlDomain, Pkgbuild, Sdef, XcodeBuild
from common_cli.adapters.native import (
    CatNative,
    CpNative,
    EchoNative,
    LsNative,
    LsOptions,
    MkdirNative,
    PwdNative,
    ReadlinkNative,
    RmNative,
)
from common_cli.adapters.npm import Npm, NpmExecOptions, NpmRunOptions
from common_cli.adapters.swift import (
    SwiftBuildConfiguration,
    SwiftBuildOptions,
    SwiftBuildProduct,
    SwiftcCompileOptions,
    Swiftc,
    Swiftlint,
    SwiftPackagePath,
    SwiftTool,
)
from common_cli.adapters.system import (
    Cat,
    Chmod,
    ChmodOptions,
    Cp,
    CpOptions,
    Du,
    DuOptions,
    Echo,
    Id,
    Ls,
    Mkdir,
    MkdirOptions,
    Pwd,
    Readlink,
    ReadlinkOptions,
    Rm,
    RmOptions,
    Rsync,
    Touch,
)

__all__ = [
    "BaseCLI",
    "Versioned",
    "Cat",
    "Chmod",
    "ChmodOptions",
    "Cp",
    "CpOptions",
    "Du",
    "DuOptions",
    "Echo",
    "Id",
    "Ls",
    "Mkdir",
    "MkdirOptions",
    "Pwd",
    "Readlink",
    "ReadlinkOptions",
    "Rm",
    "RmOptions",
    "Rsync",
    "Touch",
    "CatNative",
    "CpNative",
    "EchoNative",
    "LsNative",
    "LsOptions",
    "MkdirNative",
    "PwdNative",
    "ReadlinkNative",
    "RmNative",
    "Git",
    "RebaseOption",
    "Gh",
    "SwiftTool",
    "SwiftBuildConfiguration",
    "SwiftBuildOptions",
    "SwiftBuildProduct",
    "SwiftPackagePath",
    "Swiftc",
    "SwiftcCompileOptions",
    "Swiftlint",
    "Npm",
    "NpmExecOptions",
    "NpmRunOptions",
    "Pkgbuild",
    "Sdef",
    "XcodeBuild",
    "Launchctl",
    "LaunchctlDomain",
    "Ibtool",
]
