"""Native Adapter：直接用文件系统 API 复刻单个 POSIX 命令的行为，不启动子进程。

主要用于与对应的子进程 Adapter（Ls、Rm、Cp……）做一致性与性能对比。
返回值约定与子进程版本一致：返回「命令本应输出到 stdout 的文本」。
"""

from __future__ import annotations

import enum
import errno
import grp
import logging
import os
import pwd
import shutil
import stat
import sys
import time
from pathlib import Path
from typing import ClassVar

from common_cli.adapters.base import BaseCLI
from common_cli.adapters.system import CpOptions, MkdirOptions, ReadlinkOptions, RmOptions

logger = logging.getLogger(__name__)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class NativeCLI(BaseCLI):
    """Native Adapter 基类：tool 仅作为标识，不会被执行。"""

    tool: ClassVar[str] = ""

    def _resolve(self, path: str) -> str:
        """相对路径拼到 shell 的工作目录上，与子进程版本的 cwd 一致。"""
        return os.path.join(self.shell.working_directory, path)


class EchoNative(NativeCLI):
    tool = "echo-native"

    async def echo(self, text: str) -> str:
        """与 /bin/echo 一致：原样返回并追加一个换行。"""
        return text + "\n"

    async def echo_to_stdout(self, text: str) -> None:
        sys.stdout.write(text + "\n")
        sys.stdout.flush()


class PwdNative(NativeCLI):
    tool = "pwd-native"

    async def print_working_directory(self) -> str:
        """返回 shell 配置的工作目录，不读取进程 cwd。"""
        return self.shell.working_directory + "\n"


class CatNative(NativeCLI):
    tool = "cat-native"

    async def concatenate(self, files: list[str]) -> str:
        data = b"".join(Path(self._resolve(p)).read_bytes() for p in files)
        return data.decode("utf-8", errors="replace")


class MkdirNative(NativeCLI):
    tool = "mkdir-native"

    async def create_directory(self, path: str, options: MkdirOptions = MkdirOptions.PARENTS) -> str:
        """已存在的目录在 PARENTS 下视为成功；其余已存在情况抛 FileExistsError。"""
        path = self._resolve(path)
        if os.path.exists(path):
            if MkdirOptions.PARENTS in options and os.path.isdir(path):
                return ""
            raise FileExistsError(errno.EEXIST, "File exists", path)
        if MkdirOptions.PARENTS in options:
            os.makedirs(path)
        else:
            os.mkdir(path)
        return ""


class RmNative(NativeCLI):
    tool = "rm-native"

    async def remove(self, path: str, options: RmOptions = RmOptions.NONE) -> str:
        """按 rm 语义删除。

        - 路径不存在：FORCE 时静默返回，否则抛 FileNotFoundError
        - 目录且非 RECURSIVE：必须带 DIRECTORY_ONLY，且目录为空
        - 符号链接只删链接本身
        - 删除失败只在 FORCE 时忽略
        """
        path = self._resolve(path)
        force = RmOptions.FORCE in options
        if not os.path.lexists(path):
            if force:
                return ""
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)

        is_dir = os.path.isdir(path) and not os.path.islink(path)
        recursive = RmOptions.RECURSIVE in options
        if is_dir and not recursive:
            if RmOptions.DIRECTORY_ONLY not in options:
                raise IsADirectoryError(errno.EISDIR, "Is a directory", path)
            if os.listdir(path):
                raise OSError(errno.ENOTEMPTY, "Directory not empty", path)

        try:
            if is_dir and recursive:
                shutil.rmtree(path)
            elif is_dir:
                os.rmdir(path)
            else:
                os.unlink(path)
        except OSError:
            if not force:
                raise
            logger.debug("rm-native: ignoring failure removing %s (force)", path)
        return ""


class CpNative(NativeCLI):
    tool = "cp-native"

    async def copy(self, source: str, destination: str, options: CpOptions = CpOptions.NONE) -> str:
        """按 cp 语义复制。

        目标是已存在目录时复制到 destination/basename(source)；目标是已存在文件时覆盖；
        源为目录且未指定 RECURSIVE 时不复制也不报错（各平台 cp 行为不一致，此处从宽）。
        """
        source = self._resolve(source)
        destination = self._resolve(destination)
        if not os.path.exists(source):
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", source)

        source_is_dir = os.path.isdir(source)
        if source_is_dir and CpOptions.RECURSIVE not in options:
            return ""

        final_dest = destination
        if os.path.isdir(destination):
            final_dest = os.path.join(destination, os.path.basename(source.rstrip(os.sep)))

        parent = os.path.dirname(final_dest)
        if parent and not os.path.exists(parent):
            os.makedirs(parent, exist_ok=True)

        if source_is_dir:
            shutil.copytree(source, final_dest, symlinks=True, dirs_exist_ok=True)
        else:
            if os.path.lexists(final_dest) and not os.path.isdir(final_dest):
                os.unlink(final_dest)
            shutil.copy(source, final_dest)
        return ""


class ReadlinkNative(NativeCLI):
    tool = "readlink-native"

    async def read(self, path: str, options: ReadlinkOptions = ReadlinkOptions.CANONICALIZE) -> str:
        """CANONICALIZE 时返回解析全部链接后的绝对路径；否则返回链接目标（相对目标拼到链接所在目录）。"""
        path = self._resolve(path)
        if ReadlinkOptions.CANONICALIZE in options:
            resolved = os.path.realpath(path)
        elif os.path.islink(path):
            dest = os.readlink(path)
            if os.path.isabs(dest):
                resolved = dest
            else:
                resolved = os.path.join(os.path.dirname(os.path.abspath(path)), dest)
        else:
            resolved = os.path.abspath(path)
        return resolved + "\n"


# ── ls ──

class LsOptions(enum.Flag):
    NONE = 0
    ONE_PER_LINE = enum.auto()                # -1（默认即每行一个，不模拟分栏）
    INCLUDE_HIDDEN = enum.auto()              # -a，含 . 与 ..
    INCLUDE_HIDDEN_EXCEPT_DOTS = enum.auto()  # -A
    SORT_BY_TIME = enum.auto()                # -t
    SORT_BY_SIZE = enum.auto()                # -S
    REVERSE = enum.auto()                     # -r
    LONG_FORMAT = enum.auto()                 # -l
    HUMAN_READABLE = enum.auto()              # -h


def _lstat(path: str) -> os.stat_result | None:
    try:
        return os.lstat(path)
    except OSError:
        return None


def mode_string(st: os.stat_result | None) -> str:
    """ls -l 风格的权限串，如 drwxr-xr-x。"""
    if st is None:
        return "-rw-r--r--"
    kind = "d" if stat.S_ISDIR(st.st_mode) else ("l" if stat.S_ISLNK(st.st_mode) else "-")
    bits = ""
    for mask, ch in (
        (stat.S_IRUSR, "r"), (stat.S_IWUSR, "w"), (stat.S_IXUSR, "x"),
        (stat.S_IRGRP, "r"), (stat.S_IWGRP, "w"), (stat.S_IXGRP, "x"),
        (stat.S_IROTH, "r"), (stat.S_IWOTH, "w"), (stat.S_IXOTH, "x"),
    ):
        bits += ch if st.st_mode & mask else "-"
    return kind + bits


def human_size(size: int) -> str:
    units = ("B", "K", "M", "G", "T")
    value = float(size)
    idx = 0
    while value >= 1024.0 and idx < len(units) - 1:
        value /= 1024.0
        idx += 1
    return f"{value:.1f}{units[idx]}"


def _owner(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def _group(gid: int) -> str:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


def _format_mtime(mtime: float) -> str:
    t = time.localtime(mtime)
    return f"{_MONTHS[t.tm_mon - 1]} {t.tm_mday:02d} {t.tm_hour:02d}:{t.tm_min:02d}"


class LsNative(NativeCLI):
    """用 os.listdir 列目录，支持 ls 的一个类型化子集。"""

    tool = "ls-native"

    async def list(self, directory: str | None = None, options: LsOptions = LsOptions.NONE) -> str:
        path = self._resolve(directory) if directory is not None else self.shell.working_directory
        entries = os.listdir(path)

        show_hidden = bool(options & (LsOptions.INCLUDE_HIDDEN | LsOptions.INCLUDE_HIDDEN_EXCEPT_DOTS))
        if not show_hidden:
            entries = [e for e in entries if not e.startswith(".")]
        if LsOptions.INCLUDE_HIDDEN in options and LsOptions.INCLUDE_HIDDEN_EXCEPT_DOTS not in options:
            entries += [".", ".."]

        stats = {name: _lstat(os.path.join(path, name)) for name in entries}

        # 先按名称排序，时间/大小相同的条目保持名称顺序
        entries.sort()
        if LsOptions.SORT_BY_TIME in options:
            entries.sort(key=lambda n: stats[n].st_mtime_ns if stats[n] else 0, reverse=True)
        elif LsOptions.SORT_BY_SIZE in options:
            entries.sort(key=lambda n: stats[n].st_size if stats[n] else 0, reverse=True)
        if LsOptions.REVERSE in options:
            entries.reverse()

        if LsOptions.LONG_FORMAT not in options:
            return "\n".join(entries) + "\n"

        lines: list[str] = []
        for name in entries:
            st = stats[name]
            size = st.st_size if st else 0
            size_str = human_size(size) if LsOptions.HUMAN_READABLE in options else str(size)
            owner = _owner(st.st_uid) if st else "-"
            group = _group(st.st_gid) if st else "-"
            mtime = _format_mtime(st.st_mtime) if st else _format_mtime(0)
            lines.append(f"{mode_string(st)} 1 {owner} {group} {size_str} {mtime} {name}")
        return "\n".join(lines) + "\n"
