"""空白字符清洗步骤。"""

from __future__ import annotations

import re
from typing import Any

from text_guard.pipeline.base import NoOptions

# Python 的 \s 已覆盖 U+3000，这里显式列出以免依赖该细节
_EDGE_WHITESPACE = re.compile(r"^[\s\u3000]+|[\s\u3000]+\Z")
_WHITESPACE_RUN = re.compile(r"\s+")


class TrimWhitespace:
    """移除首尾空白（包括全角空格 U+3000）。

    Examples:
        >>> TrimWhitespace()(" a　 ")
        'a'
    """

    name = "TrimWhitespace"

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = NoOptions.resolve(options, **kwargs)

    def __call__(self, text: str) -> str:
        return _EDGE_WHITESPACE.sub("", text)


class CollapseSpaces:
    """把任意长度的连续空白替换为单个 ASCII 空格。

    换行、制表符同样会被折叠，适用于昵称、标题等单行字段。
    """

    name = "CollapseSpaces"

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = NoOptions.resolve(options, **kwargs)

    def __call__(self, text: str) -> str:
        return _WHITESPACE_RUN.sub(" ", text)
