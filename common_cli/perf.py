"""common-cli-perf：从 stdin 读取 JSON 描述的命令，重复执行并输出耗时统计。

输入示例::

    {"mode": "iterations", "host": "direct",
     "executable": {"kind": "path", "value": "/bin/echo"},
     "arguments": ["bench"], "iterations": 20,
     "baseline_average_ms": 5.0}

给出 baseline_average_ms 时，平均耗时超过 baseline × tolerance_factor 则以退出码 2 结束。
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import sys
import time
from typing import Awaitable, Callable, Literal, Optional

import click
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from common_cli.core.logging_setup import configure_logging_from
from common_cli.core.shell import CommonShell, ShellError
from common_cli.models.shell import Executable, HostKind

logger = logging.getLogger(__name__)

PERF_SECS_ENV = "COMMON_CLI_PERF_SECS"
PERF_HZ_ENV = "COMMON_CLI_PERF_HZ"
DEFAULT_SECONDS = 0.3
DEFAULT_TOLERANCE = 1.15
EXIT_PERF_FAIL = 2

_DURATION_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(ms|s)?\s*$", re.IGNORECASE)
_FREQUENCY_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(hz)?\s*$", re.IGNORECASE)


def parse_duration_seconds(raw: str) -> float:
    """解析 "300ms" / "2s" / "0.5"（无单位按秒）；非法输入抛 ValueError。"""
    m = _DURATION_RE.match(raw)
    if not m:
        raise ValueError(f"Invalid duration: {raw!r}")
    value = float(m.group(1))
    if (m.group(2) or "s").lower() == "ms":
        value /= 1000.0
    return value


def parse_frequency_hz(raw: str) -> float | None:
    """解析 "144hz" / "60"；非法或非正数返回 None。"""
    m = _FREQUENCY_RE.match(raw)
    if not m:
        return None
    value = float(m.group(1))
    return value if value > 0 else None


def perf_seconds_from_env(default: float = DEFAULT_SECONDS) -> float:
    raw = os.environ.get(PERF_SECS_ENV)
    if not raw:
        return default
    try:
        return parse_duration_seconds(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", PERF_SECS_ENV, raw)
        return default


def perf_hz_from_env(default: float | None = None) -> float | None:
    raw = os.environ.get(PERF_HZ_ENV)
    if not raw:
        return default
    hz = parse_frequency_hz(raw)
    return hz if hz is not None else default


# ── 输入 / 输出 ──

class _PerfModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExecutableInput(_PerfModel):
    kind: Literal["name", "path", "none"]
    value: Optional[str] = None

    def to_executable(self) -> Executable:
        return Executable(kind=self.kind, value=self.value or "")


class PerfInput(_PerfModel):
    """输入字段同时接受 snake_case 与 camelCase（workingDirectory、baselineAverageMS……）。"""

    mode: Literal["duration", "iterations"]
    working_directory: Optional[str] = None
    host: str = "direct"
    host_options: list[str] = Field(default_factory=list)
    executable: ExecutableInput
    arguments: list[str] = Field(default_factory=list)
    seconds: Optional[float] = None
    iterations: Optional[int] = None
    target_hz: Optional[float] = None
    baseline_average_ms: Optional[float] = Field(default=None, alias="baselineAverageMS")
    tolerance_factor: Optional[float] = None

    def host_kind(self) -> HostKind:
        """未知 host 名按 direct 处理。"""
        kind = self.host.lower()
        if kind not in ("direct", "env", "shell", "npm", "npx"):
            kind = "direct"
        options = [] if kind == "direct" else list(self.host_options)
        return HostKind(kind=kind, options=options)


class PerfOutput(BaseModel):
    iterations: int
    total_ms: float
    average_ms: float
    ok: Optional[bool] = None
    threshold_ms: Optional[float] = None


class PerfResult(BaseModel):
    iterations: int
    total_ms: float

    @property
    def average_ms(self) -> float:
        return self.total_ms / self.iterations if self.iterations else 0.0


# ── 执行 ──

async def _pace(started: float, target_hz: float | None) -> None:
    """target_hz 设置时，让每次迭代至少占满 1/target_hz 秒。"""
    if not target_hz:
        return
    remaining = 1.0 / target_hz - (time.perf_counter() - started)
    if remaining > 0:
        await asyncio.sleep(remaining)


async def run_iterations(
    shell: CommonShell,
    host: HostKind,
    executable: Executable,
    arguments: list[str],
    iterations: int,
    target_hz: float | None = None,
) -> PerfResult:
    """执行固定次数（至少 1 次），统计命令本身的累计耗时。"""
    iterations = max(iterations, 1)
    total = 0.0
    for _ in range(iterations):
        started = time.perf_counter()
        await shell.run(arguments, host=host, executable=executable)
        total += time.perf_counter() - started
        await _pace(started, target_hz)
    return PerfResult(iterations=iterations, total_ms=total * 1000.0)


async def time_for_interval(
    operation: Callable[[], Awaitable[object]],
    seconds: float,
    target_hz: float | None = None,
) -> PerfResult:
    """在 seconds 秒内反复 await operation()（至少 1 次），只累计 operation 本身的耗时。

    子进程 Adapter 与 native Adapter 都可以用它计时，便于直接对比。
    """
    deadline = time.perf_counter() + seconds
    count = 0
    total = 0.0
    while count == 0 or time.perf_counter() < deadline:
        started = time.perf_counter()
        await operation()
        total += time.perf_counter() - started
        count += 1
        await _pace(started, target_hz)
    return PerfResult(iterations=count, total_ms=total * 1000.0)


async def run_for_interval(
    shell: CommonShell,
    host: HostKind,
    executable: Executable,
    arguments: list[str],
    seconds: float,
    target_hz: float | None = None,
) -> PerfResult:
    """在 seconds 秒内反复执行命令（至少 1 次）。"""
    return await time_for_interval(
        lambda: shell.run(arguments, host=host, executable=executable), seconds, target_hz
    )


async def measure(perf_input: PerfInput) -> PerfOutput:
    """按 PerfInput 执行并给出 PerfOutput（含可选的 baseline 判定）。"""
    shell = CommonShell(executable=Executable.none())
    if perf_input.working_directory:
        shell = shell.model_copy(update={"working_directory": perf_input.working_directory})
    host = perf_input.host_kind()
    executable = perf_input.executable.to_executable()

    if perf_input.mode == "duration":
        # 未给出 seconds / target_hz 时取 COMMON_CLI_PERF_SECS / COMMON_CLI_PERF_HZ
        seconds = perf_input.seconds if perf_input.seconds is not None else perf_seconds_from_env()
        target_hz = perf_input.target_hz if perf_input.target_hz is not None else perf_hz_from_env()
        result = await run_for_interval(
            shell, host, executable, perf_input.arguments, seconds, target_hz
        )
    else:
        result = await run_iterations(
            shell, host, executable, perf_input.arguments,
            perf_input.iterations or 1, perf_input.target_hz,
        )

    output = PerfOutput(
        iterations=result.iterations,
        total_ms=result.total_ms,
        average_ms=result.average_ms,
    )
    if perf_input.baseline_average_ms is not None:
        tolerance = (
            perf_input.tolerance_factor
            if perf_input.tolerance_factor is not None
            else DEFAULT_TOLERANCE
        )
        output.threshold_ms = perf_input.baseline_average_ms * tolerance
        output.ok = output.average_ms <= output.threshold_ms
    return output


def render_output(output: PerfOutput) -> str:
    """缩进、键排序的 JSON；未设置的 ok / threshold_ms 不输出。"""
    return json.dumps(output.model_dump(exclude_none=True), indent=2, sort_keys=True)


@click.command()
@click.option("--input", "input_file", type=click.File("r"), default="-",
              help="PerfInput JSON file (default: stdin).")
@click.option("--log-level", "log_level", default="warning",
              help="silent | error | warn | info | debug")
def main(input_file, log_level: str) -> None:
    """Run a command repeatedly and report timing as JSON."""
    configure_logging_from(log_level)
    try:
        perf_input = PerfInput.model_validate_json(input_file.read())
    except ValidationError as exc:
        click.echo(f"Error: invalid perf input: {exc}", err=True)
        sys.exit(1)

    try:
        output = asyncio.run(measure(perf_input))
    except (ShellError, FileNotFoundError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    click.echo(render_output(output))
    if output.ok is False:
        click.echo(
            f"Perf FAIL: average_ms={output.average_ms} > threshold_ms={output.threshold_ms}",
            err=True,
        )
        sys.exit(EXIT_PERF_FAIL)


if __name__ == "__main__":
    main()
