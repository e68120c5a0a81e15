"""
presets / steps 命令：查看可用预设与步骤注册表。
"""

from __future__ import annotations

import json

import typer

from text_guard.cli.utils import (
    create_console,
    create_guard,
    create_presets_table,
    create_steps_table,
    print_error,
)

console = create_console()


def presets_command(
    config: str | None = None,
    name: str | None = None,
) -> None:
    """
    列出全部预设及其步骤。

    指定 name 时以 JSON 输出该预设的原始配置。
    """
    guard = create_guard(config)

    if name is not None:
        preset_config = guard.get_preset_config(name)
        if preset_config is None:
            print_error(
                f"未找到预设 '{name}'。可用预设：{', '.join(guard.list_presets())}。"
            )
        typer.echo(json.dumps(preset_config, ensure_ascii=False, indent=2))
        return

    console.print(create_presets_table(guard))
    console.print(f"\n[dim]默认预设：{guard.default_preset}（标记 *）[/dim]")


def steps_command(config: str | None = None) -> None:
    """按执行顺序列出已注册的步骤。"""
    guard = create_guard(config)
    console.print(create_steps_table(guard))
