"""工具注册表与 Toolbox。"""
from common_cli.registry.tool_registry import BUILTIN_TOOLS, Toolbox, ToolRegistry

__all__ = ["BUILTIN_TOOLS", "ToolRegistry", "Toolbox"]
