"""Git Adapter 测试：参数组装、commit 解析与 git log 时间戳。"""

from datetime import datetime, timedelta, timezone

from common_cli.adapters.git import Git, RebaseOption
from common_cli.models.git import Commit, format_git_log_date, parse_git_log_date
from common_cli.models.shell import Executable


def _args(mock_shell) -> list[str]:
    return mock_shell.run_configured.await_args.args[1]


async def test_log_and_status(mock_shell):
    git = Git(mock_shell)
    await git.log()
    assert _args(mock_shell) == ["log", "--format=%H %ci", "--reverse"]
    await git.status()
    assert _args(mock_shell) == ["status", "--porcelain"]
    await git.status(porcelain=False)
    assert _args(mock_shell) == ["status"]


async def test_current_branch_is_stripped(mock_shell):
    mock_shell.run_configured.return_value = "main\n"
    assert await Git(mock_shell).current_branch() == "main"
    assert _args(mock_shell) == ["rev-parse", "--abbrev-ref", "HEAD"]


async def test_commits_parses_log(mock_shell):
    mock_shell.run_configured.return_value = (
        "abc123 2024-09-21 12:34:56 +0000\n"
        "\n"
        "garbage\n"
        "def456 2024-09-22 08:00:00 +0200\n"
    )
    commits = await Git(mock_shell).commits(limit=5)
    assert _args(mock_shell) == ["log", "--format=%H %ci", "-n5"]
    assert [c.hash for c in commits] == ["abc123", "def456"]
    assert commits[0].date == datetime(2024, 9, 21, 12, 34, 56, tzinfo=timezone.utc)
    assert commits[1].date.utcoffset() == timedelta(hours=2)


async def test_branch_and_tag_commands(mock_shell):
    git = Git(mock_shell)
    await git.create_branch("feature", checkout=True)
    assert _args(mock_shell) == ["checkout", "-b", "feature"]
    await git.create_branch("feature")
    assert _args(mock_shell) == ["branch", "feature"]
    await git.branches(all=True)
    assert _args(mock_shell) == ["branch", "--list", "--all"]
    await git.create_tag("v1", annotated=True, message="release")
    assert _args(mock_shell) == ["tag", "-a", "-m", "release", "v1"]
    await git.tags("v*")
    assert _args(mock_shell) == ["tag", "--list", "v*"]


async def test_history_commands(mock_shell):
    git = Git(mock_shell)
    await git.merge("dev", no_ff=True, message="merge dev")
    assert _args(mock_shell) == ["merge", "--no-ff", "-m", "merge dev", "dev"]
    await git.cherry_pick("abc", no_commit=True, signoff=True)
    assert _args(mock_shell) == ["cherry-pick", "--no-commit", "--signoff", "abc"]
    await git.revert("abc")
    assert _args(mock_shell) == ["revert", "abc"]
    await git.rebase([RebaseOption.INTERACTIVE], onto="main")
    assert _args(mock_shell) == ["rebase", "-i", "main"]
    await git.rebase([RebaseOption.ABORT])
    assert _args(mock_shell) == ["rebase", "--abort"]


async def test_network_commands(mock_shell):
    git = Git(mock_shell)
    await git.fetch("origin", "main", prune=True, tags=True)
    assert _args(mock_shell) == ["fetch", "--prune", "--tags", "origin", "main"]
    await git.pull("origin", "main", rebase=True)
    assert _args(mock_shell) == ["pull", "--rebase", "origin", "main"]
    await git.push("origin", "main", force=True, set_upstream=True)
    assert _args(mock_shell) == ["push", "--force", "--set-upstream", "origin", "main"]


async def test_delete_branch_and_tag(mock_shell):
    git = Git(mock_shell)
    await git.delete_branch("old")
    assert _args(mock_shell) == ["branch", "-D", "old"]
    await git.delete_branch("old", remote="origin")
    assert _args(mock_shell) == ["push", "origin", "--delete", "old"]

    mock_shell.run_configured.reset_mock()
    await git.delete_tag("v1", remote="origin")
    calls = [c.args[1] for c in mock_shell.run_configured.await_args_list]
    assert calls == [["tag", "-d", "v1"], ["push", "origin", ":refs/tags/v1"]]
    assert await git.delete_tag("v2") == ""


async def test_remote_and_stash_commands(mock_shell):
    git = Git(mock_shell)
    await git.remote_set_url("origin", "git@example.com:r.git", push=True)
    assert _args(mock_shell) == ["remote", "set-url", "--push", "origin", "git@example.com:r.git"]
    await git.remotes(verbose=True)
    assert _args(mock_shell) == ["remote", "-v"]
    await git.remote_rename("a", "b")
    assert _args(mock_shell) == ["remote", "rename", "a", "b"]
    await git.stash_apply("stash@{1}")
    assert _args(mock_shell) == ["stash", "apply", "stash@{1}"]
    await git.stash_drop()
    assert _args(mock_shell) == ["stash", "drop"]
    await git.clean_submodules()
    assert _args(mock_shell) == ["submodule", "foreach", "git", "clean", "-fdx"]


async def test_version(mock_shell):
    await Git(mock_shell).version()
    assert _args(mock_shell) == ["--version"]


def test_spec_builders():
    clone = Git.clone_spec("src", "dst", working_directory="/w")
    assert clone.executable == Executable.named("git")
    assert clone.args == ["clone", "--no-local", "--no-hardlinks", "src", "dst"]
    assert clone.working_directory == "/w"

    assert Git.clone_spec("s", "d", working_directory="/w", no_local=False, no_hardlinks=False).args == [
        "clone", "s", "d",
    ]
    assert Git.filter_repo_spec("lib", working_directory="/w", path_rename="lib/:").args == [
        "filter-repo", "--path", "lib", "--path-rename", "lib/:", "--force",
    ]
    assert Git.filter_repo_subdirectory_spec("pkg", working_directory="/w", force=False).args == [
        "filter-repo", "--subdirectory-filter", "pkg",
    ]
    assert Git.push_all_spec("origin", working_directory="/w").args == ["push", "-u", "origin", "--all"]
    assert Git.push_tags_spec("origin", working_directory="/w", set_upstream=False).args == [
        "push", "origin", "--tags",
    ]
    assert Git.rm_spec("vendor", working_directory="/w").args == ["rm", "-r", "vendor"]
    assert Git.remote_add_spec("o", "u", working_directory="/w").args == ["remote", "add", "o", "u"]
    assert Git.remote_remove_spec("o", working_directory="/w").args == ["remote", "remove", "o"]
    assert Git.submodule_add_spec("main", "url", "path", working_directory="/w").args == [
        "submodule", "add", "-b", "main", "url", "path",
    ]


def test_git_log_date_round_trip():
    value = parse_git_log_date("2024-09-21 12:34:56 +0000")
    assert value == datetime(2024, 9, 21, 12, 34, 56, tzinfo=timezone.utc)
    assert format_git_log_date(value) == "2024-09-21 12:34:56 +0000"


def test_git_log_date_invalid():
    assert parse_git_log_date("not a date") is None
    assert parse_git_log_date("2024-09-21T12:34:56Z") is None
    assert Commit(hash="abc", date_string="garbage").date is None


def test_format_naive_date_as_utc():
    assert format_git_log_date(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02 03:04:05 +0000"
