"""字符级过滤步骤：重复标点折叠与字符白名单。"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from text_guard.pipeline.base import StepOptions

DEFAULT_REPEAT_CHARSET = "!?。，、…—"

# 中日韩统一表意文字：基本区、扩展 A–G、兼容区
HAN_RANGES = (
    r"\U00003400-\U00004DBF"
    r"\U00004E00-\U00009FFF"
    r"\U0000F900-\U0000FAFF"
    r"\U00020000-\U0002A6DF"
    r"\U0002A700-\U0002EBEF"
    r"\U0002F800-\U0002FA1F"
    r"\U00030000-\U0003134F"
)

CHINESE_PUNCTUATION = (
    "。、！？：；﹑•＂…“”‘’〝〞¦‖—\N{IDEOGRAPHIC SPACE}〈〉﹞﹝「」‹›〖〗】【»«』『〕〔》《"
    "﹐¸﹕︰﹔¡¿﹖﹌﹏﹋＇´ˊˋ―﹫︳︴¯＿￣﹢﹦﹤‐\N{SOFT HYPHEN}˜﹟﹩﹠﹪﹡﹨﹍﹉﹎﹊ˇ"
    "︵︶︷︸︹︿﹀︺︽︾ˉ﹁﹂﹃﹄︻︼（），"
)

# 不含 "<"，避免解码后的实体重新拼出标签
ENGLISH_PUNCTUATION = "`~!@#$%^&*()_+-=[]{}\\|;':\",./>?"

EMOJI_RANGES = {
    "emoticons": r"\U0001F600-\U0001F64F",
    "misc_symbols": r"\U0001F300-\U0001F5FF",
    "transport_map": r"\U0001F680-\U0001F6FF",
    "misc_symbols_2": r"\U00002600-\U000026FF",
    "dingbats": r"\U00002700-\U000027BF",
}


class CollapseRepeatedMarksOptions(StepOptions):
    """CollapseRepeatedMarks 选项。"""

    scalar_field = "max_repeat"

    max_repeat: int = Field(default=2, ge=1, description="同一标点最多连续出现次数")
    charset: str = Field(default=DEFAULT_REPEAT_CHARSET, description="参与折叠的字符集")


class CollapseRepeatedMarks:
    """把 charset 中同一字符的连续重复截断到 ``max_repeat`` 个。

    不同字符交替出现（如 ``!?!?``）不算重复。

    Examples:
        >>> CollapseRepeatedMarks()("好。。。。")
        '好。。'
        >>> CollapseRepeatedMarks()("Wow!!!!")
        'Wow!!'
    """

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = CollapseRepeatedMarksOptions.resolve(options, **kwargs)
        charset = self.options.charset
        self._pattern = (
            re.compile(f"([{re.escape(charset)}])\\1{{{self.options.max_repeat},}}")
            if charset
            else None
        )

    @property
    def name(self) -> str:
        return f"CollapseRepeatedMarks({self.options.max_repeat})"

    def __call__(self, text: str) -> str:
        if self._pattern is None:
            return text
        max_repeat = self.options.max_repeat
        return self._pattern.sub(lambda m: m.group(1) * max_repeat, text)


class EmojiRangeOptions(BaseModel):
    """五个 emoji 区块的独立开关。"""

    model_config = ConfigDict(extra="ignore", frozen=True)

    emoticons: bool = True
    misc_symbols: bool = True
    transport_map: bool = True
    misc_symbols_2: bool = True
    dingbats: bool = True


class CharacterWhitelistOptions(StepOptions):
    """CharacterWhitelist 选项。"""

    scalar_field = "enabled"

    enabled: bool = True
    allow_emoji: bool = True
    allow_chinese_punctuation: bool = True
    allow_english_punctuation: bool = True
    emoji_ranges: EmojiRangeOptions = Field(default_factory=EmojiRangeOptions)


class CharacterWhitelist:
    """字符白名单：删除所有不在允许集合中的字符。

    始终允许：单词字符（``\\w``，含各语种字母、数字、下划线）、汉字、空白。
    按选项追加：中文标点集、英文标点集（不含 ``<``）、各 emoji 区块。

    Examples:
        >>> CharacterWhitelist(allow_emoji=False)("Hi 你好！😀 ©")
        'Hi 你好！ '
    """

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = CharacterWhitelistOptions.resolve(options, **kwargs)
        self._pattern = self._build_pattern(self.options)

    @property
    def name(self) -> str:
        return "CharacterWhitelist" if self.options.enabled else "CharacterWhitelist(disabled)"

    def __call__(self, text: str) -> str:
        if not self.options.enabled:
            return text
        return self._pattern.sub("", text)

    @staticmethod
    def _build_pattern(options: CharacterWhitelistOptions) -> re.Pattern[str]:
        allowed = [r"\w", HAN_RANGES, r"\s"]

        if options.allow_chinese_punctuation:
            allowed.append(re.escape(CHINESE_PUNCTUATION))
        if options.allow_english_punctuation:
            allowed.append(re.escape(ENGLISH_PUNCTUATION))
        if options.allow_emoji:
            ranges = options.emoji_ranges
            allowed.extend(
                block for key, block in EMOJI_RANGES.items() if getattr(ranges, key)
            )

        return re.compile(f"[^{''.join(allowed)}]", re.IGNORECASE)
