"""Git Adapter：常用 git 子命令的异步封装，以及 clone / filter-repo 等 CommandSpec 构造器。"""

from __future__ import annotations

import enum
import logging
from typing import Sequence

from common_cli.adapters.base import BaseCLI, Versioned
from common_cli.models.git import Commit
from common_cli.models.shell import CommandSpec, Executable

logger = logging.getLogger(__name__)


class RebaseOption(str, enum.Enum):
    INTERACTIVE = "-i"
    CONTINUE = "--continue"
    ABORT = "--abort"


class Git(BaseCLI, Versioned):
    """git 的最小异步封装；每个方法返回 stdout。"""

    executable = Executable.named("git")

    async def run(self, args: Sequence[str]) -> str:
        """执行任意 git 子命令。"""
        return await self._run(args)

    # ── 历史 ──

    async def log(self, format: str = "%H %ci", reverse: bool = True) -> str:
        args = ["log", f"--format={format}"]
        if reverse:
            args.append("--reverse")
        return await self.run(args)

    async def commits(self, limit: int | None = None) -> list[Commit]:
        """解析 `git log --format=%H %ci`，无法解析的行跳过。"""
        args = ["log", "--format=%H %ci"]
        if limit is not None:
            args.append(f"-n{limit}")
        out = await self.run(args)
        commits = []
        for line in out.splitlines():
            commit = Commit.parse_log_line(line)
            if commit is not None:
                commits.append(commit)
        return commits

    async def diff(self, extra: Sequence[str] = ()) -> str:
        return await self.run(["diff", *extra])

    # ── 工作区 ──

    async def reset(self, hard: bool = True) -> str:
        args = ["reset"]
        if hard:
            args.append("--hard")
        return await self.run(args)

    async def clean(self, fdx: bool = True) -> str:
        args = ["clean"]
        if fdx:
            args.append("-fdx")
        return await self.run(args)

    async def submodule_update_init_recursive(self) -> str:
        return await self.run(["submodule", "update", "--init", "--recursive"])

    async def clean_submodules(self) -> str:
        return await self.run(["submodule", "foreach", "git", "clean", "-fdx"])

    async def checkout(self, ref: str) -> str:
        return await self.run(["checkout", ref])

    async def stash(self) -> str:
        return await self.run(["stash"])

    async def status(self, porcelain: bool = True) -> str:
        args = ["status"]
        if porcelain:
            args.append("--porcelain")
        return await self.run(args)

    async def current_branch(self) -> str:
        return (await self.run(["rev-parse", "--abbrev-ref", "HEAD"])).strip()

    # ── 分支与标签 ──

    async def create_branch(self, name: str, checkout: bool = False) -> str:
        if checkout:
            return await self.run(["checkout", "-b", name])
        return await self.run(["branch", name])

    async def branches(self, all: bool = False) -> str:
        args = ["branch", "--list"]
        if all:
            args.append("--all")
        return await self.run(args)

    async def tags(self, pattern: str | None = None) -> str:
        args = ["tag", "--list"]
        if pattern is not None:
            args.append(pattern)
        return await self.run(args)

    async def create_tag(self, name: str, annotated: bool = False, message: str | None = None) -> str:
        """默认创建轻量标签；annotated 时加 -a。"""
        args = ["tag"]
        if annotated:
            args.append("-a")
        if message is not None:
            args += ["-m", message]
        args.append(name)
        return await self.run(args)

    async def merge(self, ref: str, no_ff: bool = False, message: str | None = None) -> str:
        args = ["merge"]
        if no_ff:
            args.append("--no-ff")
        if message is not None:
            args += ["-m", message]
        args.append(ref)
        return await self.run(args)

    async def cherry_pick(self, ref: str, no_commit: bool = False, signoff: bool = False) -> str:
        args = ["cherry-pick"]
        if no_commit:
            args.append("--no-commit")
        if signoff:
            args.append("--signoff")
        args.append(ref)
        return await self.run(args)

    async def revert(self, ref: str, no_commit: bool = False) -> str:
        args = ["revert"]
        if no_commit:
            args.append("--no-commit")
        args.append(ref)
        return await self.run(args)

    async def rebase(self, options: Sequence[RebaseOption] = (), onto: str | None = None) -> str:
        args = ["rebase", *(RebaseOption(o).value for o in options)]
        if onto is not None:
            args.append(onto)
        return await self.run(args)

    # ── 网络 ──

    async def fetch(
        self,
        remote: str | None = None,
        refspec: str | None = None,
        prune: bool = False,
        tags: bool = False,
    ) -> str:
        args = ["fetch"]
        if prune:
            args.append("--prune")
        if tags:
            args.append("--tags")
        if remote is not None:
            args.append(remote)
        if refspec is not None:
            args.append(refspec)
        return await self.run(args)

    async def pull(self, remote: str | None = None, branch: str | None = None, rebase: bool = False) -> str:
        args = ["pull"]
        if rebase:
            args.append("--rebase")
        if remote is not None:
            args.append(remote)
        if branch is not None:
            args.append(branch)
        return await self.run(args)

    async def push(
        self,
        remote: str | None = None,
        branch: str | None = None,
        force: bool = False,
        tags: bool = False,
        set_upstream: bool = False,
    ) -> str:
        args = ["push"]
        if force:
            args.append("--force")
        if tags:
            args.append("--tags")
        if set_upstream:
            args.append("--set-upstream")
        if remote is not None:
            args.append(remote)
        if branch is not None:
            args.append(branch)
        return await self.run(args)

    # ── 删除 ──

    async def delete_branch(self, name: str, remote: str | None = None) -> str:
        """默认删本地分支（-D）；给出 remote 时改为 `push <remote> --delete <name>`。"""
        if remote is not None:
            return await self.run(["push", remote, "--delete", name])
        return await self.run(["branch", "-D", name])

    async def delete_tag(self, name: str, remote: str | None = None) -> str:
        """先删本地标签；给出 remote 时再推送删除，返回推送输出。"""
        await self.run(["tag", "-d", name])
        if remote is not None:
            return await self.run(["push", remote, f":refs/tags/{name}"])
        return ""

    # ── remote ──

    async def remote_add(self, name: str, url: str) -> str:
        return await self.run(["remote", "add", name, url])

    async def remote_remove(self, name: str) -> str:
        return await self.run(["remote", "remove", name])

    async def remote_set_url(self, name: str, url: str, push: bool = False) -> str:
        args = ["remote", "set-url"]
        if push:
            args.append("--push")
        args += [name, url]
        return await self.run(args)

    async def remotes(self, verbose: bool = False) -> str:
        args = ["remote"]
        if verbose:
            args.append("-v")
        return await self.run(args)

    async def remote_prune(self, name: str) -> str:
        return await self.run(["remote", "prune", name])

    async def remote_rename(self, old: str, new: str) -> str:
        return await self.run(["remote", "rename", old, new])

    # ── stash ──

    async def stash_list(self) -> str:
        return await self.run(["stash", "list"])

    async def stash_apply(self, index: str | None = None) -> str:
        """index 形如 "stash@{0}"；缺省时应用最新的 stash。"""
        args = ["stash", "apply"]
        if index is not None:
            args.append(index)
        return await self.run(args)

    async def stash_drop(self, index: str | None = None) -> str:
        args = ["stash", "drop"]
        if index is not None:
            args.append(index)
        return await self.run(args)

    # ── CommandSpec 构造器 ──

    @classmethod
    def _spec(cls, args: list[str], working_directory: str) -> CommandSpec:
        return CommandSpec(executable=cls.executable, args=args, working_directory=working_directory)

    @classmethod
    def clone_spec(
        cls,
        source: str,
        destination: str,
        *,
        working_directory: str,
        no_local: bool = True,
        no_hardlinks: bool = True,
    ) -> CommandSpec:
        args = ["clone"]
        if no_local:
            args.append("--no-local")
        if no_hardlinks:
            args.append("--no-hardlinks")
        args += [source, destination]
        return cls._spec(args, working_directory)

    @classmethod
    def filter_repo_spec(
        cls,
        path: str,
        *,
        working_directory: str,
        path_rename: str | None = None,
        force: bool = True,
    ) -> CommandSpec:
        args = ["filter-repo", "--path", path]
        if path_rename is not None:
            args += ["--path-rename", path_rename]
        if force:
            args.append("--force")
        return cls._spec(args, working_directory)

    @classmethod
    def filter_repo_subdirectory_spec(
        cls, subdirectory: str, *, working_directory: str, force: bool = True
    ) -> CommandSpec:
        """重写历史，让 subdirectory 成为仓库根目录。"""
        args = ["filter-repo", "--subdirectory-filter", subdirectory]
        if force:
            args.append("--force")
        return cls._spec(args, working_directory)

    @classmethod
    def remote_remove_spec(cls, name: str, *, working_directory: str) -> CommandSpec:
        return cls._spec(["remote", "remove", name], working_directory)

    @classmethod
    def remote_add_spec(cls, name: str, url: str, *, working_directory: str) -> CommandSpec:
        return cls._spec(["remote", "add", name, url], working_directory)

    @classmethod
    def push_all_spec(cls, remote: str, *, working_directory: str, set_upstream: bool = True) -> CommandSpec:
        args = ["push"]
        if set_upstream:
            args.append("-u")
        args += [remote, "--all"]
        return cls._spec(args, working_directory)

    @classmethod
    def push_tags_spec(cls, remote: str, *, working_directory: str, set_upstream: bool = True) -> CommandSpec:
        args = ["push"]
        if set_upstream:
            args.append("-u")
        args += [remote, "--tags"]
        return cls._spec(args, working_directory)

    @classmethod
    def rm_spec(cls, path: str, *, working_directory: str, recursive: bool = True) -> CommandSpec:
        args = ["rm"]
        if recursive:
            args.append("-r")
        args.append(path)
        return cls._spec(args, working_directory)

    @classmethod
    def submodule_add_spec(cls, branch: str, url: str, path: str, *, working_directory: str) -> CommandSpec:
        return cls._spec(["submodule", "add", "-b", branch, url, path], working_directory)
