"""Unicode 归一化相关步骤：规范化形式、全角转半角、中英文标点互转。"""

from __future__ import annotations

import logging
import unicodedata
from typing import Any, Literal

from pydantic import field_validator

from text_guard.pipeline.base import StepOptions

logger = logging.getLogger(__name__)

# 全角 ASCII 区 U+FF01–U+FF5E 与 ASCII U+0021–U+007E 一一对应
_FULLWIDTH_OFFSET = 0xFEE0
_FULLWIDTH_UPPER = range(0xFF21, 0xFF3B)
_FULLWIDTH_LOWER = range(0xFF41, 0xFF5B)
_FULLWIDTH_DIGITS = range(0xFF10, 0xFF1A)
_FULLWIDTH_ASCII_BLOCK = range(0xFF01, 0xFF5F)

_FULLWIDTH_LATIN_SIGNS = {
    0xFFE0: "\N{CENT SIGN}",
    0xFFE1: "\N{POUND SIGN}",
    0xFFE2: "\N{NOT SIGN}",
    0xFFE3: "\N{MACRON}",
    0xFFE4: "\N{BROKEN BAR}",
    0xFFE5: "\N{YEN SIGN}",
    0xFFE6: "\N{WON SIGN}",
}

_CJK_TO_WESTERN = {
    "，": ",",
    "。": ".",
    "？": "?",
    "！": "!",
    "：": ":",
    "；": ";",
    "\N{LEFT DOUBLE QUOTATION MARK}": '"',
    "\N{RIGHT DOUBLE QUOTATION MARK}": '"',
    "\N{LEFT SINGLE QUOTATION MARK}": "'",
    "\N{RIGHT SINGLE QUOTATION MARK}": "'",
    "＂": '"',
    "＇": "'",
    "（": "(",
    "）": ")",
    "【": "[",
    "】": "]",
    "《": "<",
    "》": ">",
}

_WESTERN_TO_CJK = {
    ",": "，",
    ".": "。",
    "?": "？",
    "!": "！",
    ":": "：",
    ";": "；",
    '"': "＂",
    "'": "＇",
    "(": "（",
    ")": "）",
    "[": "【",
    "]": "】",
    "<": "《",
    ">": "》",
}

PUNCTUATION_TABLES: dict[str, dict[int, str]] = {
    "en": str.maketrans(_CJK_TO_WESTERN),
    "zh": str.maketrans(_WESTERN_TO_CJK),
}


class NormalizeUnicodeOptions(StepOptions):
    """NormalizeUnicode 选项。``form`` 为 None 时步骤为无操作。"""

    scalar_field = "form"

    form: Literal["NFC", "NFD", "NFKC", "NFKD"] | None = "NFKC"

    @field_validator("form", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper() or None
        return value


class NormalizeUnicode:
    """Unicode 规范化（NFC / NFD / NFKC / NFKD）。

    NFKC 会把全角字母数字、兼容字符折叠为标准形式，是对抗同形字符的第一道关。

    Examples:
        >>> NormalizeUnicode("NFKC")("ＡＢＣ１２３")
        'ABC123'
    """

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = NormalizeUnicodeOptions.resolve(options, **kwargs)

    @property
    def name(self) -> str:
        return f"NormalizeUnicode({self.options.form})"

    def __call__(self, text: str) -> str:
        form = self.options.form
        if form is None:
            return text
        try:
            return unicodedata.normalize(form, text)
        except (TypeError, ValueError) as e:
            logger.warning("Unicode 规范化失败，返回原文: %s", e)
            return text


class FullwidthOptions(StepOptions):
    """FullwidthToHalfwidth 选项，四个字符类别可独立开关。"""

    ascii: bool = True
    digits: bool = True
    latin: bool = True
    punct: bool = False


class FullwidthToHalfwidth:
    """全角字符转半角。

    字符类别：
    - ``ascii``：全角字母 Ａ-Ｚ ａ-ｚ
    - ``digits``：全角数字 ０-９
    - ``latin``：全角拉丁符号 ￠￡￢￣￤￥￦（U+FFE0–U+FFE6）
    - ``punct``：其余全角 ASCII 标点（U+FF01–U+FF5E），以及全角空格 U+3000

    Examples:
        >>> FullwidthToHalfwidth()("Ｈｅｌｌｏ１２３！")
        'Hello123！'
        >>> FullwidthToHalfwidth(punct=True)("Ｈｅｌｌｏ１２３！")
        'Hello123!'
    """

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = FullwidthOptions.resolve(options, **kwargs)
        self._table = self._build_table(self.options)

    @property
    def name(self) -> str:
        enabled = [
            flag for flag in ("ascii", "digits", "latin", "punct")
            if getattr(self.options, flag)
        ]
        return f"FullwidthToHalfwidth({','.join(enabled)})"

    def __call__(self, text: str) -> str:
        if not self._table:
            return text
        return text.translate(self._table)

    @staticmethod
    def _build_table(options: FullwidthOptions) -> dict[int, str]:
        table: dict[int, str] = {}
        letters = set(_FULLWIDTH_UPPER) | set(_FULLWIDTH_LOWER)
        digits = set(_FULLWIDTH_DIGITS)

        if options.ascii:
            table.update({cp: chr(cp - _FULLWIDTH_OFFSET) for cp in letters})
        if options.digits:
            table.update({cp: chr(cp - _FULLWIDTH_OFFSET) for cp in digits})
        if options.latin:
            table.update(_FULLWIDTH_LATIN_SIGNS)
        if options.punct:
            table.update({
                cp: chr(cp - _FULLWIDTH_OFFSET)
                for cp in _FULLWIDTH_ASCII_BLOCK
                if cp not in letters and cp not in digits
            })
            table[ord("\N{IDEOGRAPHIC SPACE}")] = " "
        return table


class NormalizePunctuationsOptions(StepOptions):
    """NormalizePunctuations 选项。``locale`` 为 None 时步骤为无操作。"""

    scalar_field = "locale"

    locale: Literal["en", "zh"] | None = "zh"

    @field_validator("locale", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value


class NormalizePunctuations:
    """按固定对照表在中文标点与西文标点之间转换。

    - ``en``：，。？！：；“”‘’＂＇（）【】《》 → ,.?!:;""''"'()[]<>
    - ``zh``：反向转换，ASCII 引号 " ' 转为全角 ＂ ＇

    对照表两侧互不相交，重复执行结果不变。

    Examples:
        >>> NormalizePunctuations("en")("你好，世界！")
        '你好,世界!'
    """

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = NormalizePunctuationsOptions.resolve(options, **kwargs)

    @property
    def name(self) -> str:
        return f"NormalizePunctuations({self.options.locale})"

    def __call__(self, text: str) -> str:
        locale = self.options.locale
        if locale is None:
            return text
        return text.translate(PUNCTUATION_TABLES[locale])
