"""
流水线工厂：把"步骤名 → 配置值"的映射构建为 Pipeline。

配置值先被解析为封闭的 StepSpec 变体，再统一构造：

- ``Absent``：缺失 / False / None / 空字符串 / 0 / 空映射 → 不启用
- ``Enabled``：True → 以默认选项构造
- ``Scalar``：字符串 / 数字 / 列表，或只含保留键 ``value`` 的映射 → 单参数构造
- ``Options``：其他非空映射 → 选项映射构造

# [Design Decision] 所有构造都在 build() 中同步完成。选项非法时立即抛出
# StepConfigurationError，绝不会推迟到处理文本时才暴露。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from pydantic import ValidationError

from text_guard.errors import StepConfigurationError
from text_guard.pipeline.base import Pipeline, Step
from text_guard.registry import StepConstructor, StepRegistry

logger = logging.getLogger(__name__)

# 单值配置的保留键：``{"value": "NFKC"}`` 等价于 ``"NFKC"``
SCALAR_MARKER = "value"


@dataclass(frozen=True)
class Absent:
    """步骤未启用。"""


@dataclass(frozen=True)
class Enabled:
    """以默认选项启用。"""


@dataclass(frozen=True)
class Scalar:
    """以单个位置参数启用。"""

    value: Any


@dataclass(frozen=True)
class Options:
    """以选项映射启用，映射覆盖步骤默认值。"""

    values: dict[str, Any]


StepSpec = Union[Absent, Enabled, Scalar, Options]


def resolve_spec(raw: Any) -> StepSpec:
    """
    把一个原始配置值解析为 StepSpec。

    示例::

        resolve_spec(True)                  # Enabled()
        resolve_spec("NFKC")                # Scalar("NFKC")
        resolve_spec({"value": 50})         # Scalar(50)
        resolve_spec({"max": 50})           # Options({"max": 50})
        resolve_spec(False)                 # Absent()
    """
    if raw is True:
        return Enabled()
    if raw is None or raw is False:
        return Absent()
    if isinstance(raw, Mapping):
        if not raw:
            return Absent()
        if set(raw) == {SCALAR_MARKER}:
            return Scalar(raw[SCALAR_MARKER])
        return Options(dict(raw))
    if not raw:
        # "" / 0 / 0.0 / 空列表
        return Absent()
    return Scalar(raw)


def construct_step(name: str, constructor: StepConstructor, spec: StepSpec) -> Step | None:
    """
    按 StepSpec 调用构造器。Absent 返回 None。

    异常:
        StepConfigurationError: 构造器拒绝了给定选项
    """
    if isinstance(spec, Absent):
        return None

    try:
        if isinstance(spec, Enabled):
            step = constructor()
        elif isinstance(spec, Scalar):
            step = constructor(spec.value)
        else:
            step = constructor(spec.values)
    except (ValidationError, ValueError, TypeError) as e:
        raise StepConfigurationError(
            what=f"步骤 '{name}' 构造失败。",
            why=_describe_failure(e),
            how=f"检查预设中 '{name}' 的选项类型与取值范围。",
            step_name=name,
            options=_spec_payload(spec),
        ) from e

    if not callable(step):
        raise StepConfigurationError(
            what=f"步骤 '{name}' 构造失败。",
            why=f"构造器返回了不可调用的对象 {type(step).__name__}。",
            how="步骤构造器必须返回 str -> str 的可调用对象。",
            step_name=name,
            options=_spec_payload(spec),
        )
    return step


class PipelineFactory:
    """
    流水线工厂。

    按注册表顺序遍历步骤，对配置中出现的步骤解析 StepSpec 并构造。
    配置中未注册的步骤名被忽略（DEBUG 日志）。

    基本用法::

        factory = PipelineFactory(create_default_registry())
        pipeline = factory.build({"trim_whitespace": True, "truncate_length": 50})
        pipeline("  hello  ")  # 'hello'
    """

    def __init__(self, registry: StepRegistry) -> None:
        self.registry = registry

    def build(self, specs: Mapping[str, Any]) -> Pipeline:
        """
        构建流水线。

        参数:
            specs: 步骤名 → 原始配置值

        返回:
            Pipeline 实例

        异常:
            StepConfigurationError: 某个已注册步骤的构造器拒绝了其选项
        """
        unknown = [name for name in specs if name not in self.registry]
        if unknown:
            logger.debug("忽略未注册的步骤：%s", ", ".join(unknown))

        steps: list[Step] = []
        for name, constructor in self.registry.items():
            if name not in specs:
                continue
            step = construct_step(name, constructor, resolve_spec(specs[name]))
            if step is not None:
                steps.append(step)

        return Pipeline(steps)


def _describe_failure(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in item['loc']) or '<value>'}: {item['msg']}"
            for item in error.errors()
        )
    return str(error)


def _spec_payload(spec: StepSpec) -> Any:
    if isinstance(spec, Scalar):
        return spec.value
    if isinstance(spec, Options):
        return spec.values
    return True
