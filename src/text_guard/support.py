"""文本检查与处理的辅助函数。

这些函数不依赖预设，可以在表单校验、日志脱敏等场景中单独使用。
"""

from __future__ import annotations

import re
import unicodedata

from text_guard.pipeline.invisible import (
    CONTROL_CHARS_PATTERN,
    ZERO_WIDTH_PATTERN,
    visible_ratio,
)

__all__ = [
    "detect_language",
    "has_control_chars",
    "has_too_many_invisible_chars",
    "has_zero_width_chars",
    "is_empty_or_whitespace",
    "normalize_whitespace",
    "safe_truncate",
    "visible_ratio",
]

_WHITESPACE_RUN = re.compile(r"\s+")

# 字母 L、数字 N、标点 P、符号 S、分隔符 Z 之外的都算不可见
_PRINTABLE_CATEGORIES = frozenset("LNPSZ")

# 按优先级排列：计数相同时取靠前的语言
_SCRIPT_PATTERNS = (
    ("zh", re.compile(r"[\U00004E00-\U00009FFF]")),
    ("en", re.compile(r"[a-zA-Z]")),
    ("ru", re.compile(r"[\U00000400-\U000004FF]")),
    ("ar", re.compile(r"[\U00000600-\U000006FF]")),
)


def has_too_many_invisible_chars(text: str, threshold: float = 0.5) -> bool:
    """不可见字符占比是否超过阈值。空字符串返回 False。

    这里的"不可见"比可见比例闸门更宽：控制、格式、私用区、未分配码位
    以及组合用记号（M 大类）都计入不可见。
    """
    if not text:
        return False
    invisible = sum(
        1 for char in text if unicodedata.category(char)[0] not in _PRINTABLE_CATEGORIES
    )
    return invisible / len(text) > threshold


def is_empty_or_whitespace(text: str) -> bool:
    """是否为空或只含空白字符（包括全角空格）。"""
    return not text.strip()


def detect_language(text: str) -> str:
    """
    按文字系统粗略判断主要语言，返回 zh / en / ru / ar 之一。

    统计汉字、拉丁字母、西里尔字母、阿拉伯字母的数量取最多者；
    计数相同时按 zh、en、ru、ar 的顺序取先者，没有任何字母时返回 en。

    Examples:
        >>> detect_language("你好 world")
        'en'
        >>> detect_language("你好世界 hi")
        'zh'
    """
    counts = [(lang, len(pattern.findall(text))) for lang, pattern in _SCRIPT_PATTERNS]
    best_lang, best_count = max(counts, key=lambda item: item[1])
    return best_lang if best_count else "en"


def safe_truncate(text: str, length: int, suffix: str = "...") -> str:
    """
    截断到不超过 length 个字符，被截断时以 suffix 结尾。

    length 小于 suffix 长度时只返回 suffix 的前 length 个字符。
    """
    if len(text) <= length:
        return text
    if length <= len(suffix):
        return suffix[:max(length, 0)]
    return text[:length - len(suffix)] + suffix


def normalize_whitespace(text: str) -> str:
    """去掉首尾空白，并把内部连续空白折叠为单个空格。"""
    return _WHITESPACE_RUN.sub(" ", text.strip())


def has_control_chars(text: str) -> bool:
    return CONTROL_CHARS_PATTERN.search(text) is not None


def has_zero_width_chars(text: str) -> bool:
    return ZERO_WIDTH_PATTERN.search(text) is not None
