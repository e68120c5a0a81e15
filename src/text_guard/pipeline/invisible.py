"""不可见字符清洗步骤。

包含控制字符剥离、零宽字符剥离和可见字符比例闸门。
可见比例的计算规则在 validate 中复用，保证"清洗"与"校验"口径一致。
"""

from __future__ import annotations

import re
import unicodedata
from typing import Any

from pydantic import Field

from text_guard.pipeline.base import NoOptions, StepOptions

# C0 控制字符 + DEL，保留 \t (U+09)、\n (U+0A)、\r (U+0D)
CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

ZERO_WIDTH_CHARS = frozenset({
    "\N{ZERO WIDTH SPACE}",           # U+200B
    "\N{ZERO WIDTH NON-JOINER}",      # U+200C
    "\N{ZERO WIDTH JOINER}",          # U+200D
    "\N{ZERO WIDTH NO-BREAK SPACE}",  # U+FEFF
})
ZERO_WIDTH_PATTERN = re.compile("[" + "".join(sorted(ZERO_WIDTH_CHARS)) + "]")


def is_visible(char: str) -> bool:
    """字符是否计入可见字符（非 Unicode C 大类且非零宽字符）。"""
    return char not in ZERO_WIDTH_CHARS and not unicodedata.category(char).startswith("C")


def visible_ratio(text: str) -> float:
    """计算可见字符比例（按码位计数）。空字符串视为 1.0。"""
    if not text:
        return 1.0
    visible = sum(1 for char in text if is_visible(char))
    return visible / len(text)


class RemoveControlChars:
    """移除控制字符（U+00–U+08、U+0B、U+0C、U+0E–U+1F、U+7F）。

    制表符、换行符、回车符保留；需要单行文本时配合 CollapseSpaces 使用。
    """

    name = "RemoveControlChars"

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = NoOptions.resolve(options, **kwargs)

    def __call__(self, text: str) -> str:
        return CONTROL_CHARS_PATTERN.sub("", text)


class RemoveZeroWidth:
    """移除零宽字符（U+200B、U+200C、U+200D、U+FEFF），不插入任何替代字符。

    Examples:
        >>> RemoveZeroWidth()("pass\N{ZERO WIDTH SPACE}word")
        'password'
    """

    name = "RemoveZeroWidth"

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = NoOptions.resolve(options, **kwargs)

    def __call__(self, text: str) -> str:
        return ZERO_WIDTH_PATTERN.sub("", text)


class VisibleRatioOptions(StepOptions):
    """VisibleRatioGuard 选项。"""

    scalar_field = "min_ratio"

    min_ratio: float = Field(default=0.6, ge=0.0, le=1.0, description="最低可见字符比例")


class VisibleRatioGuard:
    """可见字符比例闸门。

    可见比例 = 去掉 Unicode C 大类（控制、格式、私用、未分配等）和零宽字符后的
    码位数 / 总码位数。比例低于 ``min_ratio`` 时整段拒绝，输出空字符串；
    否则原样输出。这是伪装成转换步骤的内容闸门：调用方若要区分
    "被拒绝"与"清洗后恰好为空"，应使用 TextGuard.validate。

    Examples:
        >>> guard = VisibleRatioGuard(min_ratio=0.8)
        >>> guard("Normal text")
        'Normal text'
        >>> guard("\N{ZERO WIDTH SPACE}" * 5)
        ''
    """

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = VisibleRatioOptions.resolve(options, **kwargs)

    @property
    def name(self) -> str:
        return f"VisibleRatioGuard({self.options.min_ratio})"

    def __call__(self, text: str) -> str:
        if visible_ratio(text) < self.options.min_ratio:
            return ""
        return text
