"""
Text Guard：用户输入文本清洗与校验。

把表单字段里的不可见字符、HTML 注入、全角伪装、刷屏标点等问题，
交给一条由预设声明、按固定顺序执行的清洗流水线处理。

快速上手::

    from text_guard import TextGuard

    guard = TextGuard()
    guard.filter("  <b>Hello</b>   World  ")          # 'Hello World'
    guard.filter("ＵｓｅｒＮａｍｅ１２３", "username")   # 'UserName123'

    result = guard.validate("\\x00\\x01abc", "safe")
    result.valid    # False
    result.errors   # ['Text contains control characters']

按字段清洗记录::

    from text_guard import FieldGuard

    fields = FieldGuard({"name": "username", "bio": "safe"})
    clean = fields.apply({"name": "Ａｌｉｃｅ", "bio": "<i>hi</i>"})
"""

from text_guard.config import (
    DEFAULT_PRESET,
    PRESETS,
    TextGuardConfig,
    create_default_registry,
    load_config,
    merge_specs,
)
from text_guard.errors import (
    ConfigLoadError,
    ConfigValidationError,
    PluginError,
    PresetNotFoundError,
    RegistryFrozenError,
    StepConfigurationError,
    TextGuardError,
)
from text_guard.facade import TextGuard, ValidationResult, get_default_guard, set_default_guard
from text_guard.factory import PipelineFactory, resolve_spec
from text_guard.fields import FieldGuard
from text_guard.pipeline import Pipeline, Step, StepOptions
from text_guard.registry import StepRegistry
from text_guard.rules import Filtered, RuleResult, Sanitized

__version__ = "0.1.0"

__all__ = [
    # Facade
    "TextGuard",
    "ValidationResult",
    "get_default_guard",
    "set_default_guard",
    # Pipeline
    "Pipeline",
    "PipelineFactory",
    "Step",
    "StepOptions",
    "StepRegistry",
    "resolve_spec",
    # Config
    "DEFAULT_PRESET",
    "PRESETS",
    "TextGuardConfig",
    "create_default_registry",
    "load_config",
    "merge_specs",
    # Rules & fields
    "FieldGuard",
    "Filtered",
    "RuleResult",
    "Sanitized",
    # Errors
    "ConfigLoadError",
    "ConfigValidationError",
    "PluginError",
    "PresetNotFoundError",
    "RegistryFrozenError",
    "StepConfigurationError",
    "TextGuardError",
    # Version
    "__version__",
]
