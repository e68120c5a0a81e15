"""
Text Guard CLI：命令行工具入口。

提供 filter / validate / presets / steps / check-config / version 子命令。

用法::

    text-guard --help
    text-guard filter "  <b>Hello</b>  World " --preset safe
    echo "ＡＢＣ１２３" | text-guard filter --stdin --preset username
    text-guard validate "$(cat bio.txt)" --preset nickname
    text-guard presets
    text-guard steps --config text_guard.yaml
    text-guard check-config text_guard.yaml
"""

from __future__ import annotations

import typer

from text_guard.cli.utils import create_console

# 创建主应用
app = typer.Typer(
    name="text-guard",
    help="Text Guard：用户输入文本清洗与校验 CLI",
    add_completion=False,
    no_args_is_help=True,
)

console = create_console()


# ============================================================
# 子命令注册
# ============================================================

@app.command(name="filter")
def filter_(
    text: str | None = typer.Argument(
        None,
        help="待清洗的文本；传入 '-' 或使用 --stdin 从标准输入读取",
    ),
    preset: str | None = typer.Option(
        None,
        "--preset",
        "-p",
        help="预设名（默认使用配置中的默认预设）",
    ),
    override: str | None = typer.Option(
        None,
        "--override",
        "-o",
        help='JSON 格式的局部覆盖，如 \'{"truncate_length": {"max": 20}}\'',
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
    stdin: bool = typer.Option(
        False,
        "--stdin",
        help="从标准输入读取文本",
    ),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="输出格式：text（仅结果文本）/ json（含输入、输出与是否改动）",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="输出逐步骤的调试日志",
    ),
) -> None:
    """按预设清洗文本。"""
    from text_guard.cli.cmd_filter import filter_command
    filter_command(
        text=text,
        preset=preset,
        override=override,
        config=config,
        stdin=stdin,
        output_format=output_format,
        verbose=verbose,
    )


@app.command(name="validate")
def validate(
    text: str | None = typer.Argument(
        None,
        help="待校验的文本；传入 '-' 或使用 --stdin 从标准输入读取",
    ),
    preset: str | None = typer.Option(
        None,
        "--preset",
        "-p",
        help="预设名（默认使用配置中的默认预设）",
    ),
    override: str | None = typer.Option(
        None,
        "--override",
        "-o",
        help="JSON 格式的局部覆盖",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
    stdin: bool = typer.Option(
        False,
        "--stdin",
        help="从标准输入读取文本",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="输出格式：rich（Rich 面板）/ json（valid + errors）",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="输出调试日志",
    ),
) -> None:
    """按预设校验文本（不修改文本），未通过时退出码为 1。"""
    from text_guard.cli.cmd_validate import validate_command
    validate_command(
        text=text,
        preset=preset,
        override=override,
        config=config,
        stdin=stdin,
        output_format=output_format,
        verbose=verbose,
    )


@app.command(name="presets")
def presets(
    name: str | None = typer.Argument(
        None,
        help="预设名；指定时以 JSON 输出该预设的配置",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
) -> None:
    """列出可用预设及其步骤。"""
    from text_guard.cli.cmd_inspect import presets_command
    presets_command(config=config, name=name)


@app.command(name="steps")
def steps(
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
) -> None:
    """按执行顺序列出已注册的步骤。"""
    from text_guard.cli.cmd_inspect import steps_command
    steps_command(config=config)


@app.command(name="check-config")
def check_config(
    path: str = typer.Argument(
        "text_guard.yaml",
        help="YAML 配置文件路径",
    ),
) -> None:
    """校验 YAML 配置文件，并试构建其中每个预设。"""
    from text_guard.cli.cmd_validate import check_config_command
    check_config_command(path=path)


@app.command(name="version")
def version() -> None:
    """显示版本信息。"""
    from text_guard import __version__
    console.print(f"Text Guard v{__version__}")


# ============================================================
# CLI 入口点
# ============================================================

def main() -> None:
    """CLI 入口点。"""
    app()


if __name__ == "__main__":
    main()
