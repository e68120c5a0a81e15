"""
CLI 工具函数：Rich 美化、参数解析、通用辅助。

提供 CLI 各子命令共用的实用函数，包括：
- Rich Console 美化输出
- 错误/成功信息统一格式
- --override JSON 解析
- TextGuard 实例创建
- 预设、步骤、校验结果的表格与面板
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, NoReturn

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from text_guard.errors import TextGuardError
from text_guard.facade import TextGuard, ValidationResult

# 全局 Console 实例
_console: Console | None = None


def create_console() -> Console:
    """
    创建或获取全局 Rich Console 实例。

    # [DX Decision] 全局单例 Console，确保所有 CLI 输出格式一致。
    """
    global _console
    if _console is None:
        _console = Console()
    return _console


def print_error(message: str, exit_code: int = 1) -> NoReturn:
    """打印错误信息并退出程序。"""
    console = create_console()
    # [DX Decision] 使用 X 而非 ✗，避免 Windows 终端编码问题
    console.print(f"[bold red]X 错误：[/bold red]{message}")
    sys.exit(exit_code)


def print_success(message: str) -> None:
    """打印成功信息。"""
    console = create_console()
    console.print(f"[bold green]OK[/bold green] {message}")


def print_warning(message: str) -> None:
    """打印警告信息。"""
    console = create_console()
    console.print(f"[bold yellow]![/bold yellow] {message}")


def configure_logging(verbose: bool) -> None:
    """--verbose 时输出 DEBUG 日志（逐步骤的长度变化）。"""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def parse_overrides(raw: str | None) -> dict[str, Any] | None:
    """
    解析 --override 传入的 JSON 对象。

    示例::

        >>> parse_overrides('{"truncate_length": {"max": 10}}')
        {'truncate_length': {'max': 10}}
    """
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        print_error(f"--override 不是合法的 JSON：{e}")
    if not isinstance(data, dict):
        print_error(f"--override 必须是 JSON 对象，实际为 {type(data).__name__}。")
    return data


def create_guard(config_path: str | None = None) -> TextGuard:
    """
    根据 CLI 参数创建 TextGuard 实例。

    未指定 --config 时按默认搜索路径查找配置文件，找不到则使用内置预设。
    配置错误直接以三段式信息退出。
    """
    try:
        return TextGuard.from_file(config_path)
    except TextGuardError as e:
        handle_text_guard_error(e)


def read_text(text: str | None, from_stdin: bool) -> str:
    """取命令行参数中的文本；--stdin 或参数为 '-' 时读取标准输入。"""
    if from_stdin or text == "-":
        return sys.stdin.read()
    if text is None:
        print_error("缺少待处理的文本。传入 TEXT 参数，或使用 --stdin 从标准输入读取。")
    return text


def create_presets_table(guard: TextGuard) -> Table:
    """创建预设列表表格。步骤按实际执行顺序列出。"""
    table = Table(title="预设", show_header=True, header_style="bold magenta")
    table.add_column("预设", style="cyan")
    table.add_column("默认", justify="center", style="green")
    table.add_column("步骤（执行顺序）", style="white")

    order = guard.list_steps()
    for name in guard.list_presets():
        config = guard.get_preset_config(name) or {}
        try:
            steps = guard.build_pipeline(name).names
        except TextGuardError as e:
            steps = [f"[red]构建失败：{escape(e.what)}[/red]"]
        unknown = [step for step in config if step not in order]
        if unknown:
            steps.append(f"[dim]（忽略未注册步骤：{', '.join(unknown)}）[/dim]")
        table.add_row(
            name,
            "*" if name == guard.default_preset else "",
            "\n".join(steps),
        )

    return table


def create_steps_table(guard: TextGuard) -> Table:
    """创建步骤注册表表格。"""
    table = Table(title="步骤注册表", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("步骤名", style="cyan")
    table.add_column("实现", style="white")

    for index, name in enumerate(guard.list_steps(), start=1):
        constructor = guard.registry.get(name)
        target = getattr(constructor, "__qualname__", type(constructor).__name__)
        table.add_row(str(index), name, target)

    return table


def create_validation_panel(result: ValidationResult, preset: str) -> Panel:
    """创建校验结果面板。"""
    if result.valid:
        return Panel(
            f"[green]OK[/green] 文本符合预设 '{preset}' 的全部检查",
            title="[bold green]校验通过[/bold green]",
            border_style="green",
            expand=False,
        )
    return Panel(
        "\n".join(f"[red]X[/red] {escape(error)}" for error in result.errors),
        title=f"[bold red]校验失败（{len(result.errors)} 项）[/bold red]",
        border_style="red",
        expand=False,
    )


def handle_text_guard_error(error: TextGuardError) -> NoReturn:
    """
    统一处理 TextGuardError 异常。

    # [DX Decision] 三段式错误信息：What / Why / How
    # 直接显示 full_message，无需重新格式化
    """
    console = create_console()
    console.print("\n[bold red]X 错误[/bold red]\n")
    console.print(error.full_message, markup=False)
    sys.exit(1)
