"""
YAML 配置文件加载与校验。

本模块负责：
1. 从文件路径或默认搜索路径加载 YAML 配置
2. 使用 Pydantic Schema 校验配置内容
3. 按 'module:attr' 导入自定义步骤并注册
4. 提供人类可读的校验错误信息

# [DX Decision] 配置加载失败时的错误信息必须精确到字段级别，
# 告诉用户哪个文件、哪个字段、什么值有问题、应该改成什么。
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from text_guard.config.defaults import create_default_registry
from text_guard.config.schema import TextGuardConfig
from text_guard.errors import (
    ConfigLoadError,
    ConfigValidationError,
    PluginError,
    StepConfigurationError,
)
from text_guard.factory import PipelineFactory
from text_guard.registry import StepConstructor, StepRegistry

logger = logging.getLogger(__name__)

# 默认配置文件搜索路径
_SEARCH_PATHS = [
    Path("text_guard.yaml"),
    Path("text_guard.yml"),
    Path(".text_guard/config.yaml"),
]


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> TextGuardConfig:
    """
    加载并校验配置。

    加载优先级：
    1. 显式指定的路径
    2. 当前目录下的默认搜索路径
    3. 内置默认配置

    参数:
        path: YAML 文件路径。None 时自动搜索默认路径。
        overrides: 运行时覆盖的配置项（合并到 YAML 配置之上）

    返回:
        TextGuardConfig 实例

    异常:
        ConfigLoadError: 文件不存在或格式错误
        ConfigValidationError: 配置校验失败
    """
    raw_config: dict[str, Any] = {}
    source = str(path) if path is not None else "<default>"

    if path is not None:
        raw_config = _load_yaml_file(Path(path))
    else:
        for search_path in _SEARCH_PATHS:
            if search_path.exists():
                logger.info("自动发现配置文件：%s", search_path)
                raw_config = _load_yaml_file(search_path)
                source = str(search_path)
                break
        if not raw_config:
            logger.info("未找到配置文件，使用内置默认配置。")

    if overrides:
        raw_config = _deep_merge(raw_config, overrides)

    return parse_config(raw_config, source)


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """加载并解析 YAML 文件。"""
    if not path.exists():
        raise ConfigLoadError(
            what=f"配置文件 '{path}' 不存在。",
            why=f"在路径 '{path.absolute()}' 下未找到该文件。",
            how="请检查文件路径是否正确。",
            file_path=str(path),
        )

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(
            what=f"无法读取配置文件 '{path}'。",
            why=str(e),
            how="请检查文件权限和编码（需要 UTF-8）。",
            file_path=str(path),
        ) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(
            what=f"配置文件 '{path}' 的 YAML 格式无效。",
            why=str(e),
            how="请使用 YAML 格式校验工具检查文件语法。",
            file_path=str(path),
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            what=f"配置文件 '{path}' 的根元素必须是字典（mapping）。",
            why=f"实际类型为 {type(data).__name__}。",
            how="请确保 YAML 文件的根元素是键值对形式，例如：\n"
                "  preset: safe\n"
                "  presets:\n"
                "    comment:\n"
                "      strip_html: true",
            file_path=str(path),
        )

    return data


def parse_config(raw: Any, source: str = "<dict>") -> TextGuardConfig:
    """使用 Pydantic 校验配置字典。

    异常:
        ConfigValidationError: 配置校验失败
    """
    try:
        return TextGuardConfig.model_validate(raw)
    except ValidationError as e:
        error_details = []
        for err in e.errors():
            field_path = " → ".join(str(loc) for loc in err["loc"])
            error_details.append(f"  字段 '{field_path}': {err['msg']}")

        raise ConfigValidationError(
            what=f"配置 '{source}' 校验失败（{len(e.errors())} 个错误）。",
            why="\n".join(error_details),
            how="请对照 TextGuardConfig 的字段说明修正配置项。"
                "可以使用 'text-guard check-config <path>' 命令进行预校验。",
            config_path=source,
            field_path=".".join(str(loc) for loc in e.errors()[0]["loc"]),
        ) from e


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    深度合并两个字典。override 中的值优先。

    用于配置文件层面的运行时覆盖；预设与调用方覆盖项的合并见 merge_specs。
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def import_step(name: str, target: str) -> StepConstructor:
    """
    按 'module:attr' 导入自定义步骤构造器。

    属性部分支持点号访问嵌套对象，如 'my_app.steps:Factory.create'。

    异常:
        ConfigLoadError: 模块或属性不存在
    """
    module_name, _, attr_path = target.partition(":")
    try:
        obj: Any = importlib.import_module(module_name.strip())
    except ImportError as e:
        raise ConfigLoadError(
            what=f"无法导入步骤 '{name}' 的模块 '{module_name}'。",
            why=str(e),
            how="确认该模块已安装，或位于当前工作目录/PYTHONPATH 中。",
            step_name=name,
            target=target,
        ) from e

    for part in attr_path.strip().split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigLoadError(
                what=f"步骤 '{name}' 的导入路径 '{target}' 无效。",
                why=f"在 '{module_name}' 中找不到属性 '{attr_path}'。",
                how="检查类名或函数名的拼写，格式为 'module:attr'。",
                step_name=name,
                target=target,
            ) from e

    return obj


def build_registry(config: TextGuardConfig) -> StepRegistry:
    """创建默认注册表，并按声明顺序追加配置中的自定义步骤。"""
    registry = create_default_registry()
    for name, target in config.steps.items():
        registry.register(name, import_step(name, target))
        logger.info("已注册自定义步骤 '%s' → %s", name, target)
    return registry


def validate_config_file(path: str | Path) -> list[str]:
    """
    校验配置文件，返回错误列表。

    除 Schema 校验外，还会导入自定义步骤并试构建每个预设的流水线，
    确保所有步骤选项在运行前就能暴露问题。

    这个方法不会抛出异常，而是收集所有错误并返回。
    用于 CLI 的 check-config 命令和 CI 流程。

    参数:
        path: YAML 文件路径

    返回:
        错误信息列表（空列表表示校验通过）
    """
    try:
        config = load_config(path=path)
        registry = build_registry(config)
    except (ConfigLoadError, ConfigValidationError, PluginError) as e:
        return [e.full_message]

    errors: list[str] = []
    factory = PipelineFactory(registry)
    for preset_name, specs in config.all_presets().items():
        try:
            factory.build(specs)
        except StepConfigurationError as e:
            errors.append(f"预设 '{preset_name}'：{e.full_message}")

    return errors
