"""核心执行层：CommonShell、命令日志、日志与配置加载。"""
