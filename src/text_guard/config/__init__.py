"""
Text Guard 配置模块。

提供内置预设、默认步骤注册表、YAML 配置加载与预设合并。
"""

from text_guard.config.defaults import (
    DEFAULT_PRESET,
    DEFAULT_STEPS,
    PRESETS,
    create_default_registry,
    list_presets,
)
from text_guard.config.loader import (
    build_registry,
    import_step,
    load_config,
    parse_config,
    validate_config_file,
)
from text_guard.config.merge import merge_specs
from text_guard.config.schema import TextGuardConfig

__all__ = [
    "DEFAULT_PRESET",
    "DEFAULT_STEPS",
    "PRESETS",
    "TextGuardConfig",
    "build_registry",
    "create_default_registry",
    "import_step",
    "list_presets",
    "load_config",
    "parse_config",
    "merge_specs",
    "validate_config_file",
]
