"""
TextGuard：顶层 Facade API。

这是 Text Guard 的主入口，面向 80% 的用户。
设计目标：**一行代码清洗一个表单字段。**

使用示例
--------

最简用法::

    from text_guard import TextGuard

    guard = TextGuard()
    guard.filter("  Hello   World  ")      # 'Hello World'

指定预设与局部覆盖::

    guard.filter(nickname, "nickname")
    guard.filter(bio, "safe", {"truncate_length": {"max": 200}})

只校验、不修改::

    result = guard.validate(text, "username")
    if not result:
        print(result.errors)

带配置文件::

    guard = TextGuard.from_file("text_guard.yaml")

# [DX Decision] filter 与 validate 的分工：
# filter 总是返回清洗后的文本，内容问题不抛异常；
# validate 不修改文本，返回人类可读的错误列表，供表单校验使用。
# 只有配置问题（未知预设、非法步骤选项）才会抛出异常。
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
from collections import OrderedDict
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, overload

from text_guard.config.loader import build_registry, load_config, parse_config
from text_guard.config.merge import merge_specs
from text_guard.config.schema import TextGuardConfig
from text_guard.errors import PresetNotFoundError
from text_guard.factory import Absent, PipelineFactory, construct_step, resolve_spec
from text_guard.pipeline.base import Pipeline
from text_guard.pipeline.invisible import (
    CONTROL_CHARS_PATTERN,
    ZERO_WIDTH_PATTERN,
    VisibleRatioGuard,
    visible_ratio,
)
from text_guard.pipeline.length import TruncateLength
from text_guard.registry import StepConstructor, StepRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """
    校验结果。

    属性:
        valid: 是否通过全部检查
        errors: 未通过的检查描述（英文，按检查顺序）
    """

    valid: bool
    errors: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式，用于 JSON API 响应。"""
        return {"valid": self.valid, "errors": list(self.errors)}


class TextGuard:
    """
    Text Guard 顶层入口。

    持有预设表、步骤注册表和流水线缓存。预设表在构造后只读；
    注册新步骤会清空流水线缓存。

    参数:
        config: 已校验的配置。None 时使用内置默认配置。
        registry: 自定义步骤注册表（高级用法）。None 时由配置生成。
        max_cached_pipelines: 流水线缓存上限，超出后淘汰最久未使用的条目。
            None 时使用配置中的 ``max_cached_pipelines``。
    """

    def __init__(
        self,
        config: TextGuardConfig | None = None,
        registry: StepRegistry | None = None,
        max_cached_pipelines: int | None = None,
    ) -> None:
        self._config = config or TextGuardConfig()
        self._presets = self._config.all_presets()
        self._registry = registry if registry is not None else build_registry(self._config)
        self._factory = PipelineFactory(self._registry)
        if max_cached_pipelines is None:
            max_cached_pipelines = self._config.max_cached_pipelines
        elif max_cached_pipelines < 1:
            raise ValueError(f"max_cached_pipelines 必须大于 0（收到 {max_cached_pipelines}）")
        self._max_cached_pipelines = max_cached_pipelines
        self._pipeline_cache: OrderedDict[str, Pipeline] = OrderedDict()

        logger.debug(
            "TextGuard 初始化完成：默认预设=%s，预设=%s，步骤=%d 个",
            self._config.preset,
            list(self._presets),
            len(self._registry),
        )

    # === 构造方式 ===

    @classmethod
    def from_config(cls, config: TextGuardConfig | Mapping[str, Any]) -> TextGuard:
        """
        从配置对象或原始配置字典创建实例。

        异常:
            ConfigValidationError: 配置字典校验失败
            ConfigLoadError: 自定义步骤导入失败
        """
        if not isinstance(config, TextGuardConfig):
            config = parse_config(dict(config))
        return cls(config)

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> TextGuard:
        """
        从 YAML 配置文件创建实例。path 为 None 时搜索默认路径。

        异常:
            ConfigLoadError: 文件不存在或格式错误
            ConfigValidationError: 配置校验失败
        """
        return cls(load_config(path))

    # === 核心操作 ===

    def filter(
        self,
        text: str,
        preset: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> str:
        """
        按预设清洗文本。

        参数:
            text: 原始文本
            preset: 预设名。None 时使用默认预设。
            overrides: 局部覆盖项，按 merge_specs 规则合并到预设之上

        返回:
            清洗后的文本（可能为空字符串）

        异常:
            PresetNotFoundError: 预设不存在
            StepConfigurationError: 某个步骤的选项非法
        """
        return self.build_pipeline(preset, overrides)(text)

    @overload
    def batch_filter(
        self,
        texts: Mapping[Any, str],
        preset: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> dict[Any, str]: ...

    @overload
    def batch_filter(
        self,
        texts: list[str] | tuple[str, ...],
        preset: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> list[str]: ...

    def batch_filter(
        self,
        texts: Mapping[Any, str] | list[str] | tuple[str, ...],
        preset: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> dict[Any, str] | list[str]:
        """
        批量清洗。映射输入返回同键字典，序列输入返回同序列表。

        整批共用同一条流水线，只构建一次。
        """
        pipeline = self.build_pipeline(preset, overrides)
        if isinstance(texts, Mapping):
            return {key: pipeline(text) for key, text in texts.items()}
        return [pipeline(text) for text in texts]

    def validate(
        self,
        text: str,
        preset: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> ValidationResult:
        """
        按预设校验文本，不修改文本。

        只检查合并后配置中启用的项：
        - visible_ratio_guard：可见字符比例不低于 min_ratio（与清洗步骤同一口径）
        - truncate_length：长度不超过 max
        - remove_control_chars：不含控制字符
        - remove_zero_width：不含零宽字符

        未知预设不抛异常，返回 valid=False。

        异常:
            StepConfigurationError: 上述步骤的选项非法
        """
        preset_name = preset or self._config.preset
        preset_config = self._presets.get(preset_name)
        if preset_config is None:
            return ValidationResult(False, [f"Preset '{preset_name}' not found"])

        specs = merge_specs(preset_config, overrides)
        errors: list[str] = []

        min_ratio = self._step_option(
            specs, "visible_ratio_guard", VisibleRatioGuard, "min_ratio"
        )
        if min_ratio is not None:
            ratio = visible_ratio(text)
            if ratio < min_ratio:
                errors.append(
                    f"Visible character ratio ({round(ratio, 4)}) is below minimum "
                    f"required ({min_ratio})"
                )

        max_length = self._step_option(specs, "truncate_length", TruncateLength, "max")
        if max_length is not None and len(text) > max_length:
            errors.append(
                f"Text length ({len(text)}) exceeds maximum allowed ({max_length})"
            )

        if _is_enabled(specs, "remove_control_chars") and CONTROL_CHARS_PATTERN.search(text):
            errors.append("Text contains control characters")

        if _is_enabled(specs, "remove_zero_width") and ZERO_WIDTH_PATTERN.search(text):
            errors.append("Text contains zero-width characters")

        return ValidationResult(not errors, errors)

    def build_pipeline(
        self,
        preset: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> Pipeline:
        """
        构建（或从缓存获取）流水线。

        缓存键是合并后配置的指纹：不同预设/覆盖组合只要合并结果相同，
        就共用同一条流水线。缓存按 LRU 淘汰，条目数不超过
        ``max_cached_pipelines``，逐请求传入不同 overrides 也不会无限增长。

        异常:
            PresetNotFoundError: 预设不存在
            StepConfigurationError: 某个步骤的选项非法
        """
        specs = merge_specs(self._require_preset(preset), overrides)
        key = fingerprint(specs)

        pipeline = self._pipeline_cache.get(key)
        if pipeline is not None:
            self._pipeline_cache.move_to_end(key)
            return pipeline

        pipeline = self._factory.build(specs)
        self._pipeline_cache[key] = pipeline
        logger.debug("构建流水线 %s：%s", key[:12], pipeline.names)

        while len(self._pipeline_cache) > self._max_cached_pipelines:
            evicted, _ = self._pipeline_cache.popitem(last=False)
            logger.debug("流水线缓存已满，淘汰 %s", evicted[:12])
        return pipeline

    @property
    def cached_pipelines(self) -> int:
        """当前缓存的流水线数量。"""
        return len(self._pipeline_cache)

    # === 扩展与内省 ===

    def register_step(self, name: str, constructor: StepConstructor) -> None:
        """
        注册（或替换）一个步骤，并清空流水线缓存。

        异常:
            PluginError: 构造器不可调用
            RegistryFrozenError: 注册表已冻结
        """
        self._registry.register(name, constructor)
        self._pipeline_cache.clear()

    def list_steps(self) -> list[str]:
        """按执行顺序返回所有已注册步骤名。"""
        return self._registry.names()

    def list_presets(self) -> list[str]:
        """返回所有可用预设名。"""
        return list(self._presets)

    def get_preset_config(self, preset: str) -> dict[str, Any] | None:
        """返回预设配置的深拷贝；预设不存在时返回 None。"""
        config = self._presets.get(preset)
        return copy.deepcopy(config) if config is not None else None

    @property
    def default_preset(self) -> str:
        return self._config.preset

    @property
    def registry(self) -> StepRegistry:
        return self._registry

    @property
    def config(self) -> TextGuardConfig:
        return self._config

    def _step_option(
        self,
        specs: Mapping[str, Any],
        name: str,
        builtin: StepConstructor,
        attr: str,
    ) -> Any:
        """
        解析合并后配置中某个步骤的一个选项值，步骤未启用时返回 None。

        优先使用注册表中的构造器，保证 validate 与 filter 对选项的理解一致；
        替换后的步骤没有该选项时退回到内置步骤的解析结果。
        """
        spec = resolve_spec(specs.get(name))
        if isinstance(spec, Absent):
            return None

        constructor = self._registry.get(name) or builtin
        step = construct_step(name, constructor, spec)
        options = getattr(step, "options", None)
        if constructor is not builtin and not hasattr(options, attr):
            options = construct_step(name, builtin, spec).options
        return getattr(options, attr)

    def _require_preset(self, preset: str | None) -> dict[str, Any]:
        preset_name = preset or self._config.preset
        preset_config = self._presets.get(preset_name)
        if preset_config is None:
            available = sorted(self._presets)
            raise PresetNotFoundError(
                what=f"未找到预设 '{preset_name}'。",
                why="该预设既不是内置预设，也没有在配置文件中声明。",
                how=f"可用预设：{', '.join(available)}。",
                preset=preset_name,
                available_presets=available,
            )
        return preset_config

    def __repr__(self) -> str:
        return f"TextGuard(preset={self._config.preset!r}, presets={self.list_presets()})"


def fingerprint(specs: Mapping[str, Any]) -> str:
    """合并后配置的稳定指纹（规范化 JSON 的 SHA-256）。"""
    canonical = json.dumps(specs, sort_keys=True, ensure_ascii=False, default=repr)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _is_enabled(specs: Mapping[str, Any], name: str) -> bool:
    return not isinstance(resolve_spec(specs.get(name)), Absent)


# 进程级默认实例，供 Filtered / FieldGuard 等未显式传入 guard 的调用方共用
_default_guard: TextGuard | None = None


def get_default_guard() -> TextGuard:
    """获取（必要时创建）使用内置默认配置的共享实例。"""
    global _default_guard
    if _default_guard is None:
        _default_guard = TextGuard()
    return _default_guard


def set_default_guard(guard: TextGuard | None) -> None:
    """替换共享实例。传入 None 会在下次获取时重新创建，通常仅在测试中使用。"""
    global _default_guard
    _default_guard = guard
