"""子进程 Adapter 与 native Adapter 的一致性测试（Linux coreutils，LC_ALL=C）。"""

import errno
import os
import re

import pytest

from common_cli.adapters.native import (
    CatNative,
    CpNative,
    EchoNative,
    LsNative,
    LsOptions,
    MkdirNative,
    ReadlinkNative,
    RmNative,
    human_size,
)
from common_cli.adapters.system import (
    Cat,
    Cp,
    CpOptions,
    Echo,
    Ls,
    Mkdir,
    MkdirOptions,
    Pwd,
    Readlink,
    ReadlinkOptions,
    Rm,
    RmOptions,
)
from common_cli.core.shell import ShellError


def _write(path, content: str) -> str:
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return str(path)


@pytest.fixture
def populated(workdir):
    _write(os.path.join(workdir, "b.txt"), "bb")
    _write(os.path.join(workdir, "a.txt"), "a")
    _write(os.path.join(workdir, "C.txt"), "cccc")
    _write(os.path.join(workdir, ".hidden"), "hhh")
    return workdir


# ── echo / pwd / cat ──

async def test_echo_parity(shell):
    """echo 与 native 版本输出一致。"""
    echo = Echo(shell)
    assert await echo.echo("bench") == await echo.native.echo("bench")


async def test_pwd_parity(shell, workdir):
    """pwd 与 native 版本都返回 shell 工作目录。"""
    pwd = Pwd(shell)
    assert await pwd.print_working_directory() == await pwd.native.print_working_directory()
    assert await pwd.native.print_working_directory() == workdir + "\n"


async def test_cat_parity(shell, workdir):
    """多个文件拼接后与 native 版本一致。"""
    first = _write(os.path.join(workdir, "one.txt"), "hello\n")
    second = _write(os.path.join(workdir, "two.txt"), "world")
    cat = Cat(shell)
    assert await cat.concatenate([first, second]) == await cat.native.concatenate([first, second])


async def test_cat_native_replaces_invalid_utf8(shell, workdir):
    """非法 UTF-8 字节替换为占位符。"""
    path = os.path.join(workdir, "bin.dat")
    with open(path, "wb") as f:
        f.write(b"ok\xff")
    assert await CatNative(shell).concatenate([path]) == "ok�"


# ── ls ──

async def test_ls_default_parity(shell, populated):
    """默认列表按字节序排序并隐藏点文件。"""
    ls = Ls(shell)
    expected = await ls.list(populated, ["-1"])
    assert expected == "C.txt\na.txt\nb.txt\n"
    assert await ls.native.list(populated) == expected


@pytest.mark.parametrize(
    "flags,options",
    [
        (["-1", "-a"], LsOptions.ONE_PER_LINE | LsOptions.INCLUDE_HIDDEN),
        (["-1", "-A"], LsOptions.ONE_PER_LINE | LsOptions.INCLUDE_HIDDEN_EXCEPT_DOTS),
        (["-1", "-S"], LsOptions.ONE_PER_LINE | LsOptions.SORT_BY_SIZE),
        (["-1", "-r"], LsOptions.ONE_PER_LINE | LsOptions.REVERSE),
        (["-1", "-S", "-r"], LsOptions.ONE_PER_LINE | LsOptions.SORT_BY_SIZE | LsOptions.REVERSE),
    ],
)
async def test_ls_options_parity(shell, populated, flags, options):
    """各排序与隐藏文件选项与 ls 输出一致。"""
    ls = Ls(shell)
    assert await ls.native.list(populated, options) == await ls.list(populated, flags)


async def test_ls_sort_by_time(shell, workdir):
    """-t 时按修改时间从新到旧排列。"""
    old = _write(os.path.join(workdir, "old.txt"), "")
    new = _write(os.path.join(workdir, "new.txt"), "")
    os.utime(old, (1_000_000, 1_000_000))
    os.utime(new, (2_000_000, 2_000_000))
    ls = Ls(shell)
    assert await ls.native.list(workdir, LsOptions.SORT_BY_TIME) == "new.txt\nold.txt\n"
    assert await ls.list(workdir, ["-1", "-t"]) == "new.txt\nold.txt\n"


async def test_ls_native_defaults_to_working_directory(shell, populated):
    """不传目录时列出 shell 工作目录。"""
    assert await LsNative(shell).list() == "C.txt\na.txt\nb.txt\n"


async def test_ls_native_long_format(shell, workdir):
    """长格式输出权限、属主、大小、时间与文件名。"""
    _write(os.path.join(workdir, "a.txt"), "hello")
    out = await LsNative(shell).list(workdir, LsOptions.LONG_FORMAT)
    line = out.rstrip("\n")
    assert re.match(r"^-[rwx-]{9} 1 \S+ \S+ 5 [A-Z][a-z]{2} \d{2} \d{2}:\d{2} a\.txt$", line)


def test_human_size():
    """-h 的大小按 1024 进位并保留一位小数。"""
    assert human_size(10) == "10.0B"
    assert human_size(1536) == "1.5K"
    assert human_size(5 * 1024 * 1024) == "5.0M"


# ── rm ──

async def test_rm_file_parity(shell, workdir):
    """删除单个文件与 native 版本一致。"""
    rm = Rm(shell)
    first = _write(os.path.join(workdir, "x.txt"), "x")
    second = _write(os.path.join(workdir, "y.txt"), "y")
    assert await rm.remove(first) == await rm.native.remove(second) == ""
    assert not os.path.exists(first)
    assert not os.path.exists(second)


async def test_rm_missing_path(shell, workdir):
    """路径不存在时 FORCE 静默，否则报错。"""
    rm = Rm(shell)
    missing = os.path.join(workdir, "missing")
    assert await rm.remove(missing, RmOptions.FORCE) == ""
    assert await rm.native.remove(missing, RmOptions.FORCE) == ""
    with pytest.raises(ShellError):
        await rm.remove(missing)
    with pytest.raises(FileNotFoundError):
        await rm.native.remove(missing)


async def test_rm_native_directory_rules(shell, workdir):
    """目录需 RECURSIVE，或 DIRECTORY_ONLY 且为空。"""
    rm = RmNative(shell)
    directory = os.path.join(workdir, "d")
    os.mkdir(directory)
    _write(os.path.join(directory, "f"), "f")

    with pytest.raises(IsADirectoryError):
        await rm.remove(directory)
    with pytest.raises(OSError) as exc_info:
        await rm.remove(directory, RmOptions.DIRECTORY_ONLY)
    assert exc_info.value.errno == errno.ENOTEMPTY

    await rm.remove(directory, RmOptions.RECURSIVE)
    assert not os.path.exists(directory)

    empty = os.path.join(workdir, "empty")
    os.mkdir(empty)
    await rm.remove(empty, RmOptions.DIRECTORY_ONLY)
    assert not os.path.exists(empty)


async def test_rm_native_removes_symlink_not_target(shell, workdir):
    """删除符号链接时只删链接本身。"""
    target = os.path.join(workdir, "target")
    os.mkdir(target)
    _write(os.path.join(target, "keep.txt"), "k")
    link = os.path.join(workdir, "link")
    os.symlink(target, link)

    await RmNative(shell).remove(link, RmOptions.RECURSIVE)
    assert not os.path.lexists(link)
    assert os.path.exists(os.path.join(target, "keep.txt"))


# ── mkdir ──

async def test_mkdir_parents_parity(shell, workdir):
    """-p 逐级创建，已存在的目录不报错。"""
    mkdir = Mkdir(shell)
    await mkdir.create_directory(os.path.join(workdir, "a", "b"))
    await mkdir.native.create_directory(os.path.join(workdir, "c", "d"))
    assert os.path.isdir(os.path.join(workdir, "a", "b"))
    assert os.path.isdir(os.path.join(workdir, "c", "d"))
    # 已存在的目录在 -p 下不报错
    assert await mkdir.native.create_directory(os.path.join(workdir, "c", "d")) == ""


async def test_mkdir_native_existing(shell, workdir):
    """非 -p 时已存在的路径抛 FileExistsError。"""
    mkdir = MkdirNative(shell)
    existing = os.path.join(workdir, "e")
    os.mkdir(existing)
    with pytest.raises(FileExistsError):
        await mkdir.create_directory(existing, MkdirOptions.NONE)
    file_path = _write(os.path.join(workdir, "file"), "")
    with pytest.raises(FileExistsError):
        await mkdir.create_directory(file_path, MkdirOptions.PARENTS)
    with pytest.raises(FileNotFoundError):
        await mkdir.create_directory(os.path.join(workdir, "x", "y"), MkdirOptions.NONE)


# ── cp ──

async def test_cp_into_directory_parity(shell, workdir):
    """目标为目录时复制到目录下的同名文件。"""
    source = _write(os.path.join(workdir, "src.txt"), "payload")
    sub_dest = os.path.join(workdir, "sub")
    native_dest = os.path.join(workdir, "native")
    os.mkdir(sub_dest)
    os.mkdir(native_dest)

    cp = Cp(shell)
    await cp.copy(source, sub_dest)
    await cp.native.copy(source, native_dest)
    for dest in (sub_dest, native_dest):
        with open(os.path.join(dest, "src.txt"), encoding="utf-8") as f:
            assert f.read() == "payload"


async def test_cp_recursive_parity(shell, workdir):
    """RECURSIVE 时复制整个目录树。"""
    tree = os.path.join(workdir, "tree")
    os.makedirs(os.path.join(tree, "inner"))
    _write(os.path.join(tree, "inner", "f.txt"), "f")

    cp = Cp(shell)
    await cp.copy(tree, os.path.join(workdir, "copy1"), CpOptions.RECURSIVE)
    await cp.native.copy(tree, os.path.join(workdir, "copy2"), CpOptions.RECURSIVE)
    assert os.path.isfile(os.path.join(workdir, "copy1", "inner", "f.txt"))
    assert os.path.isfile(os.path.join(workdir, "copy2", "inner", "f.txt"))


async def test_cp_native_edge_cases(shell, workdir):
    """源不存在、目录源、覆盖目标与自动创建父目录。"""
    cp = CpNative(shell)
    with pytest.raises(FileNotFoundError):
        await cp.copy(os.path.join(workdir, "missing"), os.path.join(workdir, "out"))

    # 目录源且未指定 RECURSIVE：不复制
    os.mkdir(os.path.join(workdir, "dir"))
    assert await cp.copy(os.path.join(workdir, "dir"), os.path.join(workdir, "dir2")) == ""
    assert not os.path.exists(os.path.join(workdir, "dir2"))

    # 已存在的目标文件被覆盖
    source = _write(os.path.join(workdir, "new.txt"), "new")
    dest = _write(os.path.join(workdir, "old.txt"), "old content")
    await cp.copy(source, dest)
    with open(dest, encoding="utf-8") as f:
        assert f.read() == "new"

    # 目标父目录不存在时自动创建
    await cp.copy(source, os.path.join(workdir, "deep", "er", "copy.txt"))
    assert os.path.isfile(os.path.join(workdir, "deep", "er", "copy.txt"))


# ── readlink ──

async def test_readlink_canonicalize_parity(shell, workdir):
    """-f 解析为绝对路径，与 native 版本一致。"""
    target = _write(os.path.join(workdir, "target.txt"), "t")
    link = os.path.join(workdir, "link.txt")
    os.symlink(target, link)

    readlink = Readlink(shell)
    assert await readlink.read(link) == await readlink.native.read(link) == target + "\n"
    assert await readlink.read(link, ReadlinkOptions.NONE) == await readlink.native.read(
        link, ReadlinkOptions.NONE
    )


async def test_readlink_native_relative_target(shell, workdir):
    """相对链接目标拼到链接所在目录上。"""
    _write(os.path.join(workdir, "target.txt"), "t")
    link = os.path.join(workdir, "rel-link")
    os.symlink("target.txt", link)
    out = await ReadlinkNative(shell).read(link, ReadlinkOptions.NONE)
    assert out == os.path.join(workdir, "target.txt") + "\n"


async def test_echo_native_to_stdout(shell, capsys):
    """echo_to_stdout 直接写到标准输出。"""
    await EchoNative(shell).echo_to_stdout("hi")
    assert capsys.readouterr().out == "hi\n"


# ── 相对路径：以 shell 工作目录为准，不看进程 cwd ──

@pytest.fixture
def elsewhere(tmp_path_factory, monkeypatch):
    """另一个目录作为进程 cwd，里面放同名文件作干扰。"""
    other = os.path.realpath(tmp_path_factory.mktemp("elsewhere"))
    os.mkdir(os.path.join(other, "sub"))
    _write(os.path.join(other, "sub", "in_process_cwd.txt"), "")
    _write(os.path.join(other, "victim.txt"), "process cwd")
    monkeypatch.chdir(other)
    return other


async def test_relative_ls_uses_shell_working_directory(shell, workdir, elsewhere):
    """相对目录按 shell 工作目录列出，与子进程版本一致。"""
    os.mkdir(os.path.join(workdir, "sub"))
    _write(os.path.join(workdir, "sub", "in_shell_wd.txt"), "")
    ls = Ls(shell)
    assert await ls.list("sub", ["-1"]) == "in_shell_wd.txt\n"
    assert await ls.native.list("sub") == "in_shell_wd.txt\n"


async def test_relative_rm_removes_file_in_shell_working_directory(shell, workdir, elsewhere):
    """相对路径删除的是 shell 工作目录下的文件，进程 cwd 下的同名文件保留。"""
    _write(os.path.join(workdir, "victim.txt"), "shell wd")
    await Rm(shell).native.remove("victim.txt")
    assert not os.path.exists(os.path.join(workdir, "victim.txt"))
    assert os.path.exists(os.path.join(elsewhere, "victim.txt"))


async def test_relative_cat_and_readlink(shell, workdir, elsewhere):
    """cat / readlink 的相对路径同样拼到 shell 工作目录上。"""
    _write(os.path.join(workdir, "victim.txt"), "shell wd")
    cat = Cat(shell)
    assert await cat.native.concatenate(["victim.txt"]) == await cat.concatenate(["victim.txt"])
    assert await cat.native.concatenate(["victim.txt"]) == "shell wd"

    readlink = Readlink(shell)
    expected = os.path.join(workdir, "victim.txt") + "\n"
    assert await readlink.native.read("victim.txt") == await readlink.read("victim.txt") == expected


async def test_relative_mkdir_and_cp(shell, workdir, elsewhere):
    """mkdir / cp 的相对路径在 shell 工作目录下创建，不触碰进程 cwd。"""
    await Mkdir(shell).native.create_directory("made/inner")
    assert os.path.isdir(os.path.join(workdir, "made", "inner"))
    assert not os.path.exists(os.path.join(elsewhere, "made"))

    _write(os.path.join(workdir, "victim.txt"), "shell wd")
    await Cp(shell).native.copy("victim.txt", "made")
    with open(os.path.join(workdir, "made", "victim.txt"), encoding="utf-8") as f:
        assert f.read() == "shell wd"
    assert not os.path.exists(os.path.join(elsewhere, "made"))
