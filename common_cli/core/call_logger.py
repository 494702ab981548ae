"""命令日志：按会话记录 CommonShell 执行过的每一条命令。

每个会话的日志存在 {log_dir}/commands_{session_id}.jsonl 文件中，
每行一条 JSON 记录（JSONL 格式），便于追加和逐行读取。
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"


class CommandLog(BaseModel):
    """单次命令执行的记录。"""
    session_id: str = DEFAULT_SESSION
    argv: list[str] = Field(default_factory=list)
    cwd: str = ""
    returncode: int = 0
    duration_ms: int = 0
    stdout_len: int = 0
    stderr_preview: str = ""   # 截断到 500 字符
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class CallLogger:
    """按会话写入/读取命令日志（JSONL 格式）。"""

    def __init__(self, log_dir: str = "data/logs", session_id: str = DEFAULT_SESSION):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.session_id = session_id

    def _session_file(self, session_id: str) -> Path:
        return self.log_dir / f"commands_{session_id}.jsonl"

    def save(self, log: CommandLog) -> None:
        """追加一条日志到该会话文件。"""
        path = self._session_file(log.session_id)
        with open(path, "a", encoding="utf-8") as f:
            f.write(log.model_dump_json() + "\n")
        logger.debug(
            "CallLogger: saved log argv0=%s returncode=%d duration=%dms",
            log.argv[0] if log.argv else "", log.returncode, log.duration_ms,
        )

    def record(
        self,
        argv: list[str],
        cwd: str,
        returncode: int,
        duration_ms: int,
        stdout: str = "",
        stderr: str = "",
    ) -> CommandLog:
        """由 CommonShell 调用：构造一条 CommandLog 并写入当前会话。"""
        log = CommandLog(
            session_id=self.session_id,
            argv=argv,
            cwd=cwd,
            returncode=returncode,
            duration_ms=duration_ms,
            stdout_len=len(stdout),
            stderr_preview=stderr[:500],
        )
        self.save(log)
        return log

    def get_logs(self, session_id: str | None = None) -> list[CommandLog]:
        """读取该会话全部日志，按时间倒序返回；无法解析的行跳过。"""
        path = self._session_file(session_id or self.session_id)
        if not path.exists():
            return []
        logs: list[CommandLog] = []
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    logs.append(CommandLog.model_validate_json(line))
                except ValueError:
                    logger.warning("CallLogger: skipping malformed line in %s", path)
        return list(reversed(logs))  # 最新的在最前
