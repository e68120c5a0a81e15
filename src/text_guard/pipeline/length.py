"""长度限制步骤。"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from text_guard.pipeline.base import StepOptions


class TruncateLengthOptions(StepOptions):
    """TruncateLength 选项。"""

    scalar_field = "max"

    max: int = Field(default=5000, ge=0, description="最多保留的码位数")


class TruncateLength:
    """按码位截断到最多 ``max`` 个字符。

    以 Python 字符串的码位计数，不会切断多字节字符；
    但组合字符序列（如带变体选择符的 emoji）可能被截断在中间。

    Examples:
        >>> TruncateLength(5)("你好世界！再见")
        '你好世界！'
    """

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = TruncateLengthOptions.resolve(options, **kwargs)

    @property
    def name(self) -> str:
        return f"TruncateLength({self.options.max})"

    def __call__(self, text: str) -> str:
        limit = self.options.max
        if len(text) <= limit:
            return text
        return text[:limit]
