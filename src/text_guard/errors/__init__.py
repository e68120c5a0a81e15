"""
Text Guard 结构化异常体系。

每一条用户可见的错误都是产品界面的一部分。
所有异常遵循"三段式"规范：What / Why / How to fix。
"""

from text_guard.errors.exceptions import (
    ConfigLoadError,
    ConfigValidationError,
    PluginError,
    PresetNotFoundError,
    RegistryFrozenError,
    StepConfigurationError,
    TextGuardError,
)

__all__ = [
    "ConfigLoadError",
    "ConfigValidationError",
    "PluginError",
    "PresetNotFoundError",
    "RegistryFrozenError",
    "StepConfigurationError",
    "TextGuardError",
]
