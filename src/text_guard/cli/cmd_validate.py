"""
validate / check-config 命令。

- validate：按预设校验文本，不修改文本；未通过时退出码为 1
- check-config：校验 YAML 配置文件，并试构建其中每个预设
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
from rich.panel import Panel
from rich.text import Text

from text_guard.cli.utils import (
    configure_logging,
    create_console,
    create_guard,
    create_validation_panel,
    handle_text_guard_error,
    parse_overrides,
    print_error,
    print_success,
    read_text,
)
from text_guard.config.loader import validate_config_file
from text_guard.errors import TextGuardError

console = create_console()


def validate_command(
    text: str | None = None,
    preset: str | None = None,
    override: str | None = None,
    config: str | None = None,
    stdin: bool = False,
    output_format: str = "rich",
    verbose: bool = False,
) -> None:
    """
    按预设校验文本。

    检查项取决于预设启用的步骤：可见字符比例、长度上限、
    控制字符、零宽字符。任一检查未通过时退出码为 1。
    """
    configure_logging(verbose)

    if output_format not in ("rich", "json"):
        print_error(f"不支持的输出格式 '{output_format}'，可选：rich / json。")

    source = read_text(text, stdin)
    overrides = parse_overrides(override)
    guard = create_guard(config)
    preset_name = preset or guard.default_preset

    try:
        result = guard.validate(source, preset_name, overrides)
    except TextGuardError as e:
        handle_text_guard_error(e)

    if output_format == "json":
        typer.echo(json.dumps(result.to_dict(), ensure_ascii=False))
    else:
        console.print(create_validation_panel(result, preset_name))

    if not result.valid:
        sys.exit(1)


def check_config_command(path: str) -> None:
    """校验 YAML 配置文件。"""
    if not Path(path).exists():
        print_error(f"文件不存在：{path}")

    console.print(f"[bold]校验配置文件：[/bold] {path}\n")

    errors = validate_config_file(path)
    if errors:
        console.print(Panel(
            Text("\n".join(f"X {err}" for err in errors)),
            title=f"[bold red]校验失败（{len(errors)} 个错误）[/bold red]",
            border_style="red",
        ))
        sys.exit(1)

    print_success(f"{path} 校验通过")
