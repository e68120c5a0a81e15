"""
清洗步骤库。

每个步骤都是无状态的 ``str -> str`` 可调用对象，构造时绑定选项。
"""

from text_guard.pipeline.base import NoOptions, Pipeline, Step, StepOptions
from text_guard.pipeline.html import HtmlDecode, StripHtml, WhitelistHtml
from text_guard.pipeline.invisible import (
    RemoveControlChars,
    RemoveZeroWidth,
    VisibleRatioGuard,
    visible_ratio,
)
from text_guard.pipeline.length import TruncateLength
from text_guard.pipeline.marks import CharacterWhitelist, CollapseRepeatedMarks
from text_guard.pipeline.unicode import (
    FullwidthToHalfwidth,
    NormalizePunctuations,
    NormalizeUnicode,
)
from text_guard.pipeline.whitespace import CollapseSpaces, TrimWhitespace

__all__ = [
    "CharacterWhitelist",
    "CollapseRepeatedMarks",
    "CollapseSpaces",
    "FullwidthToHalfwidth",
    "HtmlDecode",
    "NoOptions",
    "NormalizePunctuations",
    "NormalizeUnicode",
    "Pipeline",
    "RemoveControlChars",
    "RemoveZeroWidth",
    "Step",
    "StepOptions",
    "StripHtml",
    "TrimWhitespace",
    "TruncateLength",
    "VisibleRatioGuard",
    "WhitelistHtml",
    "visible_ratio",
]
