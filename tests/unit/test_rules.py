"""
表单校验规则单元测试。

覆盖范围:
- rules.py: Filtered, Sanitized, RuleResult
"""

from __future__ import annotations

import pytest

from text_guard import TextGuard, TextGuardConfig
from text_guard.errors import PresetNotFoundError
from text_guard.facade import set_default_guard
from text_guard.rules import Filtered, RuleResult, Sanitized


class TestRuleResult:
    """RuleResult 测试。"""

    def test_passed(self) -> None:
        assert RuleResult("x").passed
        assert not RuleResult("x", ["bad"]).passed


class TestFiltered:
    """Filtered 规则测试。"""

    def test_returns_filtered_value(self) -> None:
        result = Filtered("username").check("ＡＢＣ１２３", "name")
        assert result.passed
        assert result.value == "ABC123"

    def test_non_string(self) -> None:
        result = Filtered().check(123, "age")
        assert result.value == 123
        assert result.errors == ["age must be a string."]

    def test_message_without_attribute(self) -> None:
        assert Filtered().check(None).errors == ["must be a string."]

    def test_empty_after_filtering(self) -> None:
        result = Filtered().check("   <b></b>  ", "name")
        assert result.value == ""
        assert result.errors == ["name is empty after filtering."]

    def test_empty_allowed(self) -> None:
        result = Filtered(must_not_be_empty=False).check("   ", "name")
        assert result.passed
        assert result.value == ""

    def test_unknown_preset_propagates(self) -> None:
        with pytest.raises(PresetNotFoundError):
            Filtered("nope").check("x")

    def test_explicit_guard(self) -> None:
        guard = TextGuard.from_config({"presets": {"short": {"truncate_length": 2}}})
        assert Filtered("short", guard=guard).check("abcdef").value == "ab"

    def test_uses_shared_default_guard(self) -> None:
        set_default_guard(TextGuard(TextGuardConfig(presets={"short": {"truncate_length": 3}})))
        assert Filtered("short").check("abcdef").value == "abc"


class TestSanitized:
    """Sanitized 规则测试。"""

    def test_clean_value_passes(self) -> None:
        result = Sanitized().check("hello", "bio")
        assert result.passed
        assert result.value == "hello"

    def test_too_short(self) -> None:
        assert Sanitized(min_length=3).check("ab", "bio").errors == ["bio is too short."]

    def test_empty_string_is_too_short_by_default(self) -> None:
        assert Sanitized().check("").errors == ["is too short."]

    def test_not_visible_enough(self) -> None:
        result = Sanitized().check("\x00\x01a", "bio")
        assert result.errors == [
            "bio is not visible enough (contains too many invisible characters)."
        ]

    def test_custom_ratio(self) -> None:
        assert Sanitized(min_visible_ratio=0.3).check("\x00\x01a").passed

    def test_empty_allowed_with_zero_min_length(self) -> None:
        assert Sanitized(min_length=0).check("").passed

    def test_non_string(self) -> None:
        assert Sanitized().check(["x"], "tags").errors == ["tags must be a string."]
