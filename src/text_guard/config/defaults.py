"""
内置预设与默认步骤注册表。

# [DX Decision] 内置五个覆盖常见表单字段的预设，
# 调用方只需传入预设名即可获得一条经过验证的清洗流水线，
# 无需了解每个步骤的细节。需要定制时，通过 YAML 配置文件
# 声明同名预设覆盖，或在调用时传入 overrides 做局部调整。
"""

from __future__ import annotations

from typing import Any

from text_guard.pipeline import (
    CharacterWhitelist,
    CollapseRepeatedMarks,
    CollapseSpaces,
    FullwidthToHalfwidth,
    HtmlDecode,
    NormalizePunctuations,
    NormalizeUnicode,
    RemoveControlChars,
    RemoveZeroWidth,
    StripHtml,
    TrimWhitespace,
    TruncateLength,
    VisibleRatioGuard,
    WhitelistHtml,
)
from text_guard.registry import StepConstructor, StepRegistry

DEFAULT_PRESET = "safe"

# ============================================================
# 默认步骤注册表（插入顺序即执行顺序）
#
# 顺序约束：
# - 先剥离控制字符和零宽字符，再做 Unicode 归一化
# - 标点归一化在 HTML 步骤之前，《script》 转成的 <script> 会被剥离
# - html_decode 在 strip_html 之前，解码出的标签会被一并剥离
# - 截断在空白折叠与首尾修剪之前，截断产生的尾部空白会被修剪
# - visible_ratio_guard 最后执行，判定的是最终输出
# ============================================================

DEFAULT_STEPS: dict[str, StepConstructor] = {
    "remove_control_chars": RemoveControlChars,
    "remove_zero_width": RemoveZeroWidth,
    "unicode_normalization": NormalizeUnicode,
    "fullwidth_to_halfwidth": FullwidthToHalfwidth,
    "normalize_punctuations": NormalizePunctuations,
    "html_decode": HtmlDecode,
    "strip_html": StripHtml,
    "whitelist_html": WhitelistHtml,
    "character_whitelist": CharacterWhitelist,
    "collapse_repeated_marks": CollapseRepeatedMarks,
    "truncate_length": TruncateLength,
    "collapse_spaces": CollapseSpaces,
    "trim_whitespace": TrimWhitespace,
    "visible_ratio_guard": VisibleRatioGuard,
}

_ALL_FULLWIDTH = {"ascii": True, "digits": True, "latin": True, "punct": True}

_NO_EMOJI = {
    "emoticons": False,
    "misc_symbols": False,
    "transport_map": False,
    "misc_symbols_2": False,
    "dingbats": False,
}

_ALL_EMOJI = {key: True for key in _NO_EMOJI}

# ============================================================
# 内置预设
# 预设中键的顺序仅为可读性，不影响执行顺序。
# ============================================================

PRESETS: dict[str, dict[str, Any]] = {
    # 普通文本表单：昵称、标题、评论等
    "safe": {
        "trim_whitespace": True,
        "collapse_spaces": True,
        "remove_control_chars": True,
        "remove_zero_width": True,
        "strip_html": True,
        "visible_ratio_guard": {"min_ratio": 0.6},
        "truncate_length": {"max": 5000},
    },
    # 严格模式：全角转半角、字符白名单、不允许 emoji
    "strict": {
        "trim_whitespace": True,
        "collapse_spaces": True,
        "remove_control_chars": True,
        "remove_zero_width": True,
        "unicode_normalization": "NFKC",
        "fullwidth_to_halfwidth": dict(_ALL_FULLWIDTH),
        "html_decode": True,
        "strip_html": True,
        "character_whitelist": {
            "enabled": True,
            "allow_emoji": False,
            "allow_chinese_punctuation": True,
            "allow_english_punctuation": True,
            "emoji_ranges": dict(_NO_EMOJI),
        },
        "visible_ratio_guard": {"min_ratio": 0.8},
        "truncate_length": {"max": 5000},
    },
    # 用户名：标点统一为西文，连接符不允许连续
    "username": {
        "trim_whitespace": True,
        "collapse_spaces": True,
        "remove_control_chars": True,
        "remove_zero_width": True,
        "unicode_normalization": "NFKC",
        "fullwidth_to_halfwidth": dict(_ALL_FULLWIDTH),
        "normalize_punctuations": "en",
        "strip_html": True,
        "collapse_repeated_marks": {"max_repeat": 1, "charset": "_-."},
        "visible_ratio_guard": {"min_ratio": 0.9},
        "truncate_length": {"max": 50},
    },
    # 昵称：保留中文标点与 emoji
    "nickname": {
        "trim_whitespace": True,
        "collapse_spaces": True,
        "remove_control_chars": True,
        "remove_zero_width": True,
        "unicode_normalization": "NFKC",
        "fullwidth_to_halfwidth": {"ascii": True, "digits": True, "latin": True, "punct": False},
        "html_decode": True,
        "strip_html": True,
        "character_whitelist": {
            "enabled": True,
            "allow_emoji": True,
            "allow_chinese_punctuation": True,
            "allow_english_punctuation": True,
            "emoji_ranges": dict(_ALL_EMOJI),
        },
        "visible_ratio_guard": {"min_ratio": 0.7},
        "truncate_length": {"max": 30},
    },
    # 富文本：标签白名单
    "rich_text": {
        "trim_whitespace": True,
        "remove_control_chars": True,
        "remove_zero_width": True,
        "unicode_normalization": "NFC",
        "whitelist_html": {
            "tags": [
                "p", "b", "i", "u", "a", "ul", "ol", "li", "code", "pre",
                "br", "blockquote", "h1", "h2", "h3",
            ],
            "attrs": ["href", "title", "rel"],
            "protocols": ["http", "https", "mailto"],
        },
        "visible_ratio_guard": {"min_ratio": 0.5},
        "truncate_length": {"max": 20000},
    },
}


def create_default_registry() -> StepRegistry:
    """创建包含全部内置步骤的注册表（未冻结）。"""
    return StepRegistry(DEFAULT_STEPS)


def list_presets() -> list[str]:
    """返回所有内置预设名（按字母序）。"""
    return sorted(PRESETS)
