"""POSIX 系统工具 Adapter：cat、du、echo、ls、pwd、readlink、rm、touch、chmod、cp、id、mkdir、rsync。

每个 Adapter 只负责拼参数并交给 CommonShell；选项用 enum.Flag 表示，
与 native 版本（common_cli.adapters.native）共用同一套选项类型。
"""

from __future__ import annotations

import enum
import posixpath
from typing import TYPE_CHECKING

from common_cli.adapters.base import BaseCLI
from common_cli.models.shell import CommandSpec, Executable

if TYPE_CHECKING:
    from common_cli.adapters.native import (
        CatNative,
        CpNative,
        EchoNative,
        LsNative,
        MkdirNative,
        PwdNative,
        ReadlinkNative,
        RmNative,
    )


# ── 选项 ──

class DuOptions(enum.Flag):
    NONE = 0
    HUMAN_READABLE = enum.auto()  # -h
    SUMMARIZE = enum.auto()       # -s


class ReadlinkOptions(enum.Flag):
    NONE = 0
    CANONICALIZE = enum.auto()  # -f，跟随所有符号链接并输出绝对路径


class RmOptions(enum.Flag):
    NONE = 0
    RECURSIVE = enum.auto()       # -r
    FORCE = enum.auto()           # -f
    DIRECTORY_ONLY = enum.auto()  # -d，只删除空目录


class ChmodOptions(enum.Flag):
    NONE = 0
    RECURSIVE = enum.auto()  # -R


class CpOptions(enum.Flag):
    NONE = 0
    RECURSIVE = enum.auto()  # -R
    FORCE = enum.auto()      # -f


class MkdirOptions(enum.Flag):
    NONE = 0
    PARENTS = enum.auto()  # -p


def _rm_arguments(path: str, options: RmOptions) -> list[str]:
    args: list[str] = []
    if RmOptions.RECURSIVE in options:
        args.append("-r")
    if RmOptions.FORCE in options:
        args.append("-f")
    if RmOptions.DIRECTORY_ONLY in options:
        args.append("-d")
    args.append(path)
    return args


# ── Adapter ──

class Cat(BaseCLI):
    """通过 cat 拼接并输出文件内容。"""

    executable = Executable.named("cat")

    async def concatenate(self, files: list[str]) -> str:
        return await self._run(files)

    @property
    def native(self) -> CatNative:
        from common_cli.adapters.native import CatNative
        return CatNative(self.shell)


class Du(BaseCLI):
    executable = Executable.named("du")

    async def size(
        self,
        path: str,
        options: DuOptions = DuOptions.HUMAN_READABLE | DuOptions.SUMMARIZE,
    ) -> str:
        args: list[str] = []
        if DuOptions.HUMAN_READABLE in options:
            args.append("-h")
        if DuOptions.SUMMARIZE in options:
            args.append("-s")
        args.append(path)
        return await self._run(args)


class Echo(BaseCLI):
    """包装 /bin/echo，主要用于演示与性能对比。"""

    executable = Executable.at_path("/bin/echo")

    async def echo(self, text: str) -> str:
        return await self._run([text])

    @property
    def native(self) -> EchoNative:
        from common_cli.adapters.native import EchoNative
        return EchoNative(self.shell)


class Ls(BaseCLI):
    """通过 ls 列目录；options 为原样透传的 ls 参数（如 ["-1", "-a"]）。"""

    executable = Executable.named("ls")

    async def list(self, directory: str | None = None, options: list[str] | None = None) -> str:
        args = list(options or [])
        if directory is not None:
            args.append(directory)
        return await self._run(args)

    @property
    def native(self) -> LsNative:
        from common_cli.adapters.native import LsNative
        return LsNative(self.shell)


class Pwd(BaseCLI):
    executable = Executable.named("pwd")

    async def print_working_directory(self) -> str:
        return await self._run([])

    @property
    def native(self) -> PwdNative:
        from common_cli.adapters.native import PwdNative
        return PwdNative(self.shell)


class Readlink(BaseCLI):
    """读取符号链接目标。"""

    executable = Executable.named("readlink")

    async def read(self, path: str, options: ReadlinkOptions = ReadlinkOptions.CANONICALIZE) -> str:
        args: list[str] = []
        if ReadlinkOptions.CANONICALIZE in options:
            args.append("-f")
        args.append(path)
        return await self._run(args)

    @property
    def native(self) -> ReadlinkNative:
        from common_cli.adapters.native import ReadlinkNative
        return ReadlinkNative(self.shell)


class Rm(BaseCLI):
    """通过 rm 删除文件或目录，支持 -r、-f、-d。"""

    executable = Executable.named("rm")

    async def remove(self, path: str, options: RmOptions = RmOptions.NONE) -> str:
        return await self._run(_rm_arguments(path, options))

    @classmethod
    def spec(cls, path: str, options: RmOptions = RmOptions.NONE, *, working_directory: str) -> CommandSpec:
        """构造 `rm [-r] [-f] [-d] <path>` 的 CommandSpec，不执行。"""
        return CommandSpec(
            executable=cls.executable,
            args=_rm_arguments(path, options),
            working_directory=working_directory,
        )

    @property
    def native(self) -> RmNative:
        from common_cli.adapters.native import RmNative
        return RmNative(self.shell)


class Touch(BaseCLI):
    executable = Executable.named("touch")

    async def create(self, path: str, create_parents: bool = False) -> str:
        """创建（或更新时间戳）文件；create_parents 时先 mkdir -p 父目录。"""
        parent = posixpath.dirname(path)
        if create_parents and parent:
            await Mkdir(self.shell).create_directory(parent, MkdirOptions.PARENTS)
        return await self._run([path])


class Chmod(BaseCLI):
    """chmod，支持符号模式（u+x）与 -R 递归。"""

    executable = Executable.named("chmod")

    @staticmethod
    def arguments(mode: str, paths: list[str], options: ChmodOptions = ChmodOptions.NONE) -> list[str]:
        args: list[str] = []
        if ChmodOptions.RECURSIVE in options:
            args.append("-R")
        args.append(mode)
        args.extend(paths)
        return args

    async def apply(self, mode: str, paths: list[str], options: ChmodOptions = ChmodOptions.NONE) -> str:
        return await self._run(self.arguments(mode, paths, options))


class Cp(BaseCLI):
    """通过 cp 复制文件与目录，支持 -R 与 -f。"""

    executable = Executable.named("cp")

    async def copy(self, source: str, destination: str, options: CpOptions = CpOptions.NONE) -> str:
        args: list[str] = []
        if CpOptions.RECURSIVE in options:
            args.append("-R")
        if CpOptions.FORCE in options:
            args.append("-f")
        args.extend([source, destination])
        return await self._run(args)

    @property
    def native(self) -> CpNative:
        from common_cli.adapters.native import CpNative
        return CpNative(self.shell)


class Id(BaseCLI):
    """查询用户与组身份。"""

    executable = Executable.named("id")

    async def whoami(self) -> str:
        return await self._run([])

    async def user(self, user: str) -> str:
        return await self._run([user])


class Mkdir(BaseCLI):
    executable = Executable.named("mkdir")

    async def create_directory(self, path: str, options: MkdirOptions = MkdirOptions.PARENTS) -> str:
        args: list[str] = []
        if MkdirOptions.PARENTS in options:
            args.append("-p")
        args.append(path)
        return await self._run(args)

    @property
    def native(self) -> MkdirNative:
        from common_cli.adapters.native import MkdirNative
        return MkdirNative(self.shell)


class Rsync(BaseCLI):
    executable = Executable.named("rsync")

    async def sync(
        self,
        source: str,
        destination: str,
        archive: bool = True,
        delete: bool = False,
        extra: list[str] | None = None,
    ) -> str:
        args: list[str] = []
        if archive:
            args.append("-a")
        if delete:
            args.append("--delete")
        args.extend(extra or [])
        args.extend([source, destination])
        return await self._run(args)
