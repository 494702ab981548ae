"""配置模型：CommonCLIConfig、ToolConfig。

从 YAML 加载，描述基础 CommonShell 的默认值以及每个工具的可执行文件覆盖。
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from common_cli.models.shell import Executable, HostKind


class ToolConfig(BaseModel):
    """单个工具的覆盖项：指定可执行文件路径和/或启动方式。"""

    executable_path: Optional[str] = None
    host: Optional[Literal["direct", "env", "shell", "npm", "npx"]] = None
    host_options: list[str] = Field(default_factory=list)

    def executable(self) -> Executable | None:
        if self.executable_path:
            return Executable.at_path(self.executable_path)
        return None

    def host_kind(self) -> HostKind | None:
        if self.host is None:
            return None
        return HostKind(kind=self.host, options=list(self.host_options))


class CommonCLIConfig(BaseModel):
    """common-cli 的全局配置。"""

    working_directory: Optional[str] = None  # 缺省为进程当前目录
    environment: dict[str, str] = Field(default_factory=dict)
    timeout: Optional[float] = None          # 单条命令超时（秒）
    log_level: str = "info"
    call_log_dir: Optional[str] = None       # 设置后把每条命令写入 JSONL
    tools: dict[str, ToolConfig] = Field(default_factory=dict)
