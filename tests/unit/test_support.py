"""
辅助函数单元测试。

覆盖范围:
- support.py: 不可见字符检测、空白判断、语言检测、安全截断、空白归一化
"""

from __future__ import annotations

import pytest

from text_guard.support import (
    detect_language,
    has_control_chars,
    has_too_many_invisible_chars,
    has_zero_width_chars,
    is_empty_or_whitespace,
    normalize_whitespace,
    safe_truncate,
    visible_ratio,
)


class TestInvisibleChecks:
    """不可见字符相关检测。"""

    def test_has_too_many_invisible_chars(self) -> None:
        assert has_too_many_invisible_chars("\x00\x01a")
        assert not has_too_many_invisible_chars("abc")

    def test_threshold_is_exclusive(self) -> None:
        """比例恰好等于阈值时不算超过。"""
        assert not has_too_many_invisible_chars("a\x00")
        assert has_too_many_invisible_chars("a\x00", threshold=0.4)

    def test_private_use_counts_as_invisible(self) -> None:
        assert has_too_many_invisible_chars("\U000F0000\U000F0001a")

    def test_empty_string(self) -> None:
        assert not has_too_many_invisible_chars("")

    def test_has_control_chars(self) -> None:
        assert has_control_chars("a\x1bb")
        assert not has_control_chars("a\tb\n")

    def test_has_zero_width_chars(self) -> None:
        assert has_zero_width_chars("a\N{ZERO WIDTH JOINER}b")
        assert not has_zero_width_chars("ab")

    def test_visible_ratio_reexported(self) -> None:
        assert visible_ratio("a\x00") == 0.5


class TestWhitespace:
    """空白相关辅助函数。"""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", "\N{IDEOGRAPHIC SPACE} "])
    def test_is_empty_or_whitespace(self, text: str) -> None:
        assert is_empty_or_whitespace(text)

    def test_not_empty(self) -> None:
        assert not is_empty_or_whitespace(" a ")

    def test_normalize_whitespace(self) -> None:
        assert normalize_whitespace("  a \n\t b  ") == "a b"


class TestDetectLanguage:
    """detect_language 测试。"""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("你好世界", "zh"),
            ("hello", "en"),
            ("привет", "ru"),
            ("مرحبا", "ar"),
            ("你好 world", "en"),
            ("你好世界 hi", "zh"),
        ],
    )
    def test_dominant_script(self, text: str, expected: str) -> None:
        assert detect_language(text) == expected

    def test_tie_prefers_earlier_language(self) -> None:
        assert detect_language("你好ab") == "zh"

    @pytest.mark.parametrize("text", ["", "12345", "!!!"])
    def test_no_letters_defaults_to_english(self, text: str) -> None:
        assert detect_language(text) == "en"


class TestSafeTruncate:
    """safe_truncate 测试。"""

    def test_short_text_unchanged(self) -> None:
        assert safe_truncate("hi", 5) == "hi"

    def test_truncated_with_suffix(self) -> None:
        result = safe_truncate("hello world", 8)
        assert result == "hello..."
        assert len(result) == 8

    def test_custom_suffix(self) -> None:
        assert safe_truncate("hello world", 8, suffix="\N{HORIZONTAL ELLIPSIS}") == (
            "hello w\N{HORIZONTAL ELLIPSIS}"
        )

    def test_length_shorter_than_suffix(self) -> None:
        assert safe_truncate("hello", 2) == ".."
        assert safe_truncate("hello", 0) == ""
