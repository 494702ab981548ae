"""CommonShell：所有 Adapter 共享的进程执行入口。

CommonShell 是一个值对象（pydantic 模型）：工作目录、可执行文件、启动方式、环境变量与超时。
Adapter 不直接修改它，而是通过 configured() 得到绑定了自身可执行文件的副本，再调用 run()。
"""

from __future__ import annotations

import asyncio
import errno
import logging
import os
import shlex
import shutil
import time
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from common_cli.core.call_logger import CallLogger
from common_cli.models.shell import (
    SH_PATH,
    CommandSpec,
    Executable,
    HostKind,
    ProcessOutput,
    build_argv,
    preferred_host,
)

logger = logging.getLogger(__name__)


class ShellError(RuntimeError):
    """命令以非零退出码结束（或超时）。保留 argv 与输出，便于上层排查。"""

    def __init__(self, argv: list[str], returncode: int, stdout: str = "", stderr: str = ""):
        self.argv = argv
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = stderr.strip() or stdout.strip()
        super().__init__(f"Command failed ({returncode}): {shlex.join(argv)}\n{detail}".rstrip())


class ShellTimeoutError(ShellError):
    """命令超过 CommonShell.timeout 仍未结束，已被终止。"""

    def __init__(self, argv: list[str], timeout: float):
        self.timeout = timeout
        super().__init__(argv, -1, stderr=f"timed out after {timeout}s")


def _subprocess_env(*layers: dict[str, str] | None) -> dict[str, str]:
    """合并当前进程环境与各层 extra_env，后者覆盖前者。"""
    env = os.environ.copy()
    for extra in layers:
        if extra:
            env.update(extra)
    return env


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


class CommonShell(BaseModel):
    """共享的执行上下文；复制而非原地修改（model_copy）。"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    working_directory: str = Field(default_factory=os.getcwd)
    executable: Executable = Field(default_factory=Executable.none)
    host_kind: HostKind | None = None
    environment: dict[str, str] = Field(default_factory=dict)
    timeout: float | None = None

    # 可选：记录每条命令到 JSONL，不参与序列化
    call_logger: CallLogger | None = Field(default=None, exclude=True)

    # ── 绑定 ──

    def configured(
        self,
        executable: Executable,
        host: HostKind | None = None,
        working_directory: str | None = None,
    ) -> CommonShell:
        """返回绑定到 executable 的副本；host 缺省时按 preferred_host 选择，空工作目录忽略。"""
        update: dict = {
            "executable": executable,
            "host_kind": host or preferred_host(executable),
        }
        if working_directory:
            update["working_directory"] = working_directory
        return self.model_copy(update=update)

    # ── 执行 ──

    async def launch(
        self,
        arguments: Sequence[str],
        *,
        host: HostKind | None = None,
        executable: Executable | None = None,
        environment: dict[str, str] | None = None,
    ) -> ProcessOutput:
        """执行命令并返回完整结果，非零退出码不抛错；程序不存在时抛 FileNotFoundError。"""
        exe = executable or self.executable
        resolved_host = host or self.host_kind or preferred_host(exe)
        argv = build_argv(resolved_host, exe, list(arguments))
        cwd = self.working_directory or None
        env = _subprocess_env(self.environment, environment)

        # env 找不到程序时只会以 127 退出；无附加参数时先按合并后的 PATH 查找
        if resolved_host.kind == "env" and not resolved_host.options and exe.kind == "name":
            if shutil.which(exe.value, path=env.get("PATH")) is None:
                logger.error("[CALL] shell.run: executable not found in PATH: %s", exe.value)
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", exe.value)

        logger.info("[CALL] shell.run: %s cwd=%s", shlex.join(argv), cwd)
        start = time.monotonic()
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            env=env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            raw_out, raw_err = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.error("[CALL] shell.run timeout: %s timeout=%ss", argv[0], self.timeout)
            if self.call_logger is not None:
                self.call_logger.record(argv, cwd or "", -1, _elapsed_ms(start), "", "timed out")
            raise ShellTimeoutError(argv, self.timeout or 0.0)

        output = ProcessOutput(
            argv=argv,
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=raw_out.decode("utf-8", errors="replace"),
            stderr=raw_err.decode("utf-8", errors="replace"),
            duration_ms=_elapsed_ms(start),
        )
        if output.stdout:
            logger.debug("STDOUT %s", output.stdout.strip())
        if output.stderr:
            logger.debug("STDERR %s", output.stderr.strip())
        if self.call_logger is not None:
            self.call_logger.record(
                argv, cwd or "", output.returncode, output.duration_ms, output.stdout, output.stderr
            )
        return output

    async def run(
        self,
        arguments: Sequence[str],
        *,
        host: HostKind | None = None,
        executable: Executable | None = None,
        environment: dict[str, str] | None = None,
    ) -> str:
        """执行命令并返回 stdout；非零退出码抛 ShellError。"""
        output = await self.launch(
            arguments, host=host, executable=executable, environment=environment
        )
        if not output.ok:
            logger.error(
                "[CALL] shell.run non-zero exit: returncode=%s argv0=%s stderr=%s",
                output.returncode,
                output.argv[0],
                output.stderr.strip()[:300],
            )
            raise ShellError(output.argv, output.returncode, output.stdout, output.stderr)
        return output.stdout

    async def run_configured(
        self,
        executable: Executable,
        arguments: Sequence[str],
        *,
        host: HostKind | None = None,
        working_directory: str | None = None,
        argument_prefix: Sequence[str] = (),
        environment: dict[str, str] | None = None,
    ) -> str:
        """先 configured() 绑定 executable，再以 argument_prefix + arguments 执行。"""
        shell = self.configured(executable, host=host, working_directory=working_directory)
        return await shell.run([*argument_prefix, *arguments], environment=environment)

    async def run_spec(self, spec: CommandSpec) -> str:
        """执行一个 CommandSpec（由 Adapter 的静态 *_spec 构造器生成）。"""
        return await self.run_configured(
            spec.executable, spec.args, working_directory=spec.working_directory or None
        )

    async def run_passthrough(
        self,
        executable: Executable,
        arguments: Sequence[str],
        environment: dict[str, str] | None = None,
        working_directory: str | None = None,
    ) -> int:
        """执行命令，子进程直接继承当前进程的 stdout/stderr；返回退出码（被信号终止时为负的信号值）。"""
        shell = self.configured(executable, working_directory=working_directory)
        argv = build_argv(shell.host_kind or preferred_host(executable), executable, list(arguments))
        logger.info("[CALL] shell.passthrough: %s cwd=%s", shlex.join(argv), shell.working_directory)
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=shell.working_directory or None,
            env=_subprocess_env(self.environment, environment),
        )
        return await process.wait()

    async def launch_detached(
        self,
        command: str,
        shell_path: str = SH_PATH,
        working_directory: str | None = None,
    ) -> str:
        """通过 sh -lc 以 nohup 后台方式启动命令，立即返回该命令字符串。"""
        shell = self.model_copy(
            update={"working_directory": working_directory}
        ) if working_directory else self
        detached = f"nohup {command} >/dev/null 2>&1 &"
        await shell.run(
            ["-lc", detached], host=HostKind.direct(), executable=Executable.at_path(shell_path)
        )
        logger.info("[CALL] shell.launch_detached: %s", command)
        return command
