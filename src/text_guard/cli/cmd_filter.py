"""
filter 命令：按预设清洗文本。

输出只包含清洗后的文本本身（不经过 Rich 渲染），便于在管道中使用::

    echo "<b>Hi</b>  there" | text-guard filter --stdin
    text-guard filter "ＡＢＣ！！！" --preset username
"""

from __future__ import annotations

import json

import typer

from text_guard.cli.utils import (
    configure_logging,
    create_guard,
    handle_text_guard_error,
    parse_overrides,
    print_error,
    read_text,
)
from text_guard.errors import TextGuardError


def filter_command(
    text: str | None = None,
    preset: str | None = None,
    override: str | None = None,
    config: str | None = None,
    stdin: bool = False,
    output_format: str = "text",
    verbose: bool = False,
) -> None:
    """按预设清洗文本并输出结果。"""
    configure_logging(verbose)

    if output_format not in ("text", "json"):
        print_error(f"不支持的输出格式 '{output_format}'，可选：text / json。")

    source = read_text(text, stdin)
    overrides = parse_overrides(override)
    guard = create_guard(config)
    preset_name = preset or guard.default_preset

    try:
        result = guard.filter(source, preset_name, overrides)
    except TextGuardError as e:
        handle_text_guard_error(e)

    if output_format == "json":
        typer.echo(json.dumps(
            {
                "preset": preset_name,
                "input": source,
                "output": result,
                "changed": result != source,
            },
            ensure_ascii=False,
        ))
    else:
        typer.echo(result)
