"""
表单校验规则。

规则与 Web 框架无关：``check(value, attribute)`` 返回 RuleResult，
调用方把 errors 接入自己的表单/序列化层即可。

基本用法::

    result = Filtered("username").check(form["name"], "name")
    if result.errors:
        return {"errors": result.errors}
    form["name"] = result.value  # 清洗后的值
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from text_guard.facade import TextGuard, get_default_guard
from text_guard.pipeline.invisible import visible_ratio


@dataclass(frozen=True)
class RuleResult:
    """
    规则检查结果。

    属性:
        value: 检查后的值。Filtered 返回清洗后的文本，其他规则原样返回
        errors: 错误信息列表，空列表表示通过
    """

    value: Any
    errors: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors


def _message(attribute: str | None, text: str) -> str:
    return f"{attribute} {text}" if attribute else text


class Filtered:
    """
    清洗并校验：按预设过滤，返回清洗后的值。

    参数:
        preset: 预设名
        must_not_be_empty: 清洗后（去除首尾空白）为空时是否报错
        guard: TextGuard 实例。None 时使用共享默认实例
    """

    def __init__(
        self,
        preset: str = "safe",
        must_not_be_empty: bool = True,
        guard: TextGuard | None = None,
    ) -> None:
        self.preset = preset
        self.must_not_be_empty = must_not_be_empty
        self._guard = guard

    @property
    def guard(self) -> TextGuard:
        return self._guard if self._guard is not None else get_default_guard()

    def check(self, value: Any, attribute: str | None = None) -> RuleResult:
        if not isinstance(value, str):
            return RuleResult(value, [_message(attribute, "must be a string.")])

        clean = self.guard.filter(value, self.preset)

        if self.must_not_be_empty and not clean.strip():
            return RuleResult(clean, [_message(attribute, "is empty after filtering.")])
        return RuleResult(clean)


class Sanitized:
    """
    只校验、不清洗：检查最小长度与可见字符比例。

    可见比例与 VisibleRatioGuard 同一口径。

    参数:
        min_visible_ratio: 最低可见字符比例
        min_length: 最小长度（码位数）
    """

    def __init__(self, min_visible_ratio: float = 0.6, min_length: int = 1) -> None:
        self.min_visible_ratio = min_visible_ratio
        self.min_length = min_length

    def check(self, value: Any, attribute: str | None = None) -> RuleResult:
        if not isinstance(value, str):
            return RuleResult(value, [_message(attribute, "must be a string.")])

        if len(value) < self.min_length:
            return RuleResult(value, [_message(attribute, "is too short.")])

        if value and visible_ratio(value) < self.min_visible_ratio:
            return RuleResult(
                value,
                [_message(
                    attribute,
                    "is not visible enough (contains too many invisible characters).",
                )],
            )
        return RuleResult(value)
