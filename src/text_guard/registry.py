"""
步骤注册表：步骤名到构造器的有序映射。

# [Design Decision] 注册顺序即执行顺序。预设只决定"启用哪些步骤、用什么选项"，
# 执行顺序完全由注册表决定，预设中键的书写顺序不影响结果。
# 这样所有预设共享同一条经过推敲的执行顺序（例如先解码实体再剥离标签）。
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from text_guard.errors import PluginError, RegistryFrozenError
from text_guard.pipeline.base import Step

logger = logging.getLogger(__name__)

StepConstructor = Callable[..., Step]


class StepRegistry:
    """
    有序的步骤注册表。

    - 新名称追加到末尾
    - 重复注册同名步骤会替换构造器，但保留其原有位置
    - 同名同构造器的重复注册是无操作
    - ``freeze()`` 之后任何注册都抛出 RegistryFrozenError

    基本用法::

        registry = StepRegistry()
        registry.register("trim_whitespace", TrimWhitespace)
        registry.register("truncate_length", TruncateLength)
        registry.names()  # ['trim_whitespace', 'truncate_length']
    """

    def __init__(self, steps: dict[str, StepConstructor] | None = None) -> None:
        self._constructors: dict[str, StepConstructor] = {}
        self._frozen = False
        for name, constructor in (steps or {}).items():
            self.register(name, constructor)

    def register(self, name: str, constructor: StepConstructor) -> None:
        """
        注册一个步骤构造器。

        参数:
            name: 步骤名（预设中使用的键）
            constructor: 类或工厂函数。按 StepSpec 以 ``()``、``(value)``
                或 ``(mapping)`` 形式调用，返回 Step

        异常:
            RegistryFrozenError: 注册表已冻结
            PluginError: 构造器不可调用或步骤名为空
        """
        if self._frozen:
            raise RegistryFrozenError(
                what=f"无法注册步骤 '{name}'：注册表已冻结。",
                why="freeze() 之后注册表只读，以保证已构建的流水线与注册表一致。",
                how="在初始化阶段（调用 freeze() 之前）完成所有步骤注册。",
            )
        if not name or not isinstance(name, str):
            raise PluginError(
                what=f"步骤注册失败：步骤名 {name!r} 无效。",
                why="步骤名必须是非空字符串。",
                how="使用 snake_case 的步骤名，如 'strip_emoji'。",
            )
        if not callable(constructor):
            raise PluginError(
                what=f"步骤 '{name}' 注册失败。",
                why=f"提供的构造器 {constructor!r} 不可调用。",
                how="传入一个类或工厂函数，调用后返回 str -> str 的可调用对象。",
            )

        existing = self._constructors.get(name)
        if existing is constructor:
            return
        if existing is not None:
            logger.info("步骤 '%s' 的构造器已被替换", name)

        self._constructors[name] = constructor

    def get(self, name: str) -> StepConstructor | None:
        """按名称获取构造器，未注册时返回 None。"""
        return self._constructors.get(name)

    def names(self) -> list[str]:
        """按执行顺序返回所有步骤名。"""
        return list(self._constructors)

    def items(self) -> Iterator[tuple[str, StepConstructor]]:
        """按执行顺序迭代 (步骤名, 构造器)。"""
        return iter(list(self._constructors.items()))

    def freeze(self) -> None:
        """冻结注册表，此后注册表只读。"""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def copy(self) -> StepRegistry:
        """返回未冻结的副本。"""
        return StepRegistry(dict(self._constructors))

    def __contains__(self, name: Any) -> bool:
        return name in self._constructors

    def __len__(self) -> int:
        return len(self._constructors)

    def __repr__(self) -> str:
        state = ", frozen" if self._frozen else ""
        return f"StepRegistry({self.names()}{state})"
