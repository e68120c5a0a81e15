"""清洗步骤基础协议与流水线执行器。

本模块定义了清洗步骤的统一接口、步骤选项的基类，以及按顺序执行步骤的
Pipeline。

每个步骤都是 ``str -> str`` 的纯函数：
- 构造时解析并冻结选项，运行时不再读取配置
- 不持有任何跨调用的可变状态，可在多个调用方之间共享
- 运行时绝不抛异常；无法处理的输入原样返回
- 空字符串输入必须返回空字符串
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, ClassVar, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

_OptionsT = TypeVar("_OptionsT", bound="StepOptions")


@runtime_checkable
class Step(Protocol):
    """清洗步骤协议接口。

    任何实现了 ``name`` 和 ``__call__(text) -> str`` 的对象都可以作为步骤，
    无需显式继承。

    最小实现示例::

        class Shout:
            name = "shout"

            def __call__(self, text: str) -> str:
                return text.upper()
    """

    @property
    def name(self) -> str:
        """步骤名称，用于日志。"""
        ...

    def __call__(self, text: str) -> str:
        """执行转换。"""
        ...


class StepOptions(BaseModel):
    """步骤选项基类。

    子类声明字段及默认值；调用方给出的值只覆盖已知字段，未知字段被忽略。
    字段类型或取值不合法时，pydantic 抛出 ValidationError，
    由 PipelineFactory 包装为 StepConfigurationError。

    ``scalar_field`` 声明单值配置（如 ``truncate_length: 50``）对应的字段，
    为 None 时该步骤不接受单值配置。
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    scalar_field: ClassVar[str | None] = None

    @classmethod
    def resolve(cls: type[_OptionsT], value: Any = None, **kwargs: Any) -> _OptionsT:
        """把 None / 单值 / 映射三种形态统一解析为选项对象。"""
        if value is None:
            data: dict[str, Any] = {}
        elif isinstance(value, Mapping):
            data = dict(value)
        elif cls.scalar_field is None:
            raise ValueError(
                f"{cls.__qualname__} 不接受单值参数，请使用选项映射（收到 {value!r}）"
            )
        else:
            data = {cls.scalar_field: value}

        data.update(kwargs)
        return cls.model_validate(data)


class NoOptions(StepOptions):
    """无选项步骤使用的占位选项。

    任何配置形态（True、单值、映射）都被接受并忽略，
    因此 ``{"strip_html": {...}}`` 这类覆盖不会让构建失败。
    """

    @classmethod
    def resolve(cls, value: Any = None, **kwargs: Any) -> NoOptions:
        return cls()


def step_name(step: Any) -> str:
    """步骤名称；普通函数没有 name 属性时退回到函数名。"""
    name = getattr(step, "name", None)
    if isinstance(name, str):
        return name
    return getattr(step, "__name__", type(step).__name__)


class Pipeline:
    """流水线执行器。

    严格按从左到右的顺序执行：``text_{i+1} = step_i(text_i)``。
    不做短路：某个步骤返回空字符串（如 VisibleRatioGuard 拒绝）后，
    后续步骤照常执行，它们对空字符串都是无操作。

    Examples:
        >>> pipeline = Pipeline([TrimWhitespace(), CollapseSpaces()])
        >>> pipeline("  a   b  ")
        'a b'
    """

    def __init__(self, steps: Iterable[Step] = ()) -> None:
        self._steps = tuple(steps)

    def __call__(self, text: str) -> str:
        return self.run(text)

    def run(self, text: str) -> str:
        """对文本执行完整流水线。"""
        current = text
        for step in self._steps:
            before = len(current)
            current = step(current)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("步骤 %s：%d → %d 个字符", step_name(step), before, len(current))
        return current

    @property
    def steps(self) -> tuple[Step, ...]:
        """获取步骤列表（只读）。"""
        return self._steps

    @property
    def names(self) -> list[str]:
        """返回所有步骤的名称列表。"""
        return [step_name(step) for step in self._steps]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __repr__(self) -> str:
        return f"Pipeline({self.names})"
