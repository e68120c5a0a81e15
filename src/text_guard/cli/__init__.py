"""
Text Guard CLI：命令行工具。

- filter: 按预设清洗文本
- validate: 按预设校验文本
- presets / steps: 查看预设与步骤注册表
- check-config: 校验 YAML 配置文件
"""

from text_guard.cli.app import app, main

__all__ = ["app", "main"]
