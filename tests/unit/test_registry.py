"""
步骤注册表单元测试。

覆盖范围:
- registry.py: 注册顺序、替换、冻结、错误处理
- config/defaults.py: 默认注册表的执行顺序
"""

from __future__ import annotations

import logging

import pytest

from text_guard.config.defaults import DEFAULT_STEPS, create_default_registry
from text_guard.errors import PluginError, RegistryFrozenError
from text_guard.pipeline import CollapseSpaces, TrimWhitespace, TruncateLength
from text_guard.registry import StepRegistry


class Shout:
    name = "Shout"

    def __call__(self, text: str) -> str:
        return text.upper()


class TestStepRegistry:
    """StepRegistry 测试。"""

    def test_register_appends_in_order(self) -> None:
        registry = StepRegistry()
        registry.register("trim_whitespace", TrimWhitespace)
        registry.register("truncate_length", TruncateLength)

        assert registry.names() == ["trim_whitespace", "truncate_length"]
        assert len(registry) == 2
        assert "trim_whitespace" in registry
        assert "missing" not in registry

    def test_init_from_mapping(self) -> None:
        registry = StepRegistry({"a": TrimWhitespace, "b": CollapseSpaces})
        assert list(registry.items()) == [("a", TrimWhitespace), ("b", CollapseSpaces)]

    def test_get(self) -> None:
        registry = StepRegistry({"a": TrimWhitespace})
        assert registry.get("a") is TrimWhitespace
        assert registry.get("missing") is None

    def test_replacement_keeps_position(self, caplog: pytest.LogCaptureFixture) -> None:
        """替换构造器时位置不变，并记录 INFO 日志。"""
        registry = StepRegistry({"a": TrimWhitespace, "b": CollapseSpaces})

        with caplog.at_level(logging.INFO, logger="text_guard.registry"):
            registry.register("a", Shout)

        assert registry.names() == ["a", "b"]
        assert registry.get("a") is Shout
        assert "已被替换" in caplog.text

    def test_same_constructor_is_noop(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = StepRegistry({"a": TrimWhitespace})

        with caplog.at_level(logging.INFO, logger="text_guard.registry"):
            registry.register("a", TrimWhitespace)

        assert registry.names() == ["a"]
        assert caplog.text == ""

    def test_frozen_registry_rejects_register(self) -> None:
        registry = StepRegistry({"a": TrimWhitespace})
        registry.freeze()

        assert registry.frozen
        with pytest.raises(RegistryFrozenError) as exc_info:
            registry.register("b", Shout)

        assert isinstance(exc_info.value, PluginError)
        assert "b" not in registry

    def test_non_callable_constructor(self) -> None:
        with pytest.raises(PluginError, match="不可调用"):
            StepRegistry().register("bad", "not callable")  # type: ignore[arg-type]

    @pytest.mark.parametrize("name", ["", None, 3])
    def test_invalid_name(self, name: object) -> None:
        with pytest.raises(PluginError, match="步骤名"):
            StepRegistry().register(name, Shout)  # type: ignore[arg-type]

    def test_copy_is_independent_and_unfrozen(self) -> None:
        registry = StepRegistry({"a": TrimWhitespace})
        registry.freeze()

        clone = registry.copy()
        clone.register("b", Shout)

        assert not clone.frozen
        assert clone.names() == ["a", "b"]
        assert registry.names() == ["a"]

    def test_items_snapshot(self) -> None:
        """迭代过程中注册新步骤不影响本次迭代。"""
        registry = StepRegistry({"a": TrimWhitespace})
        items = registry.items()
        registry.register("b", Shout)
        assert [name for name, _ in items] == ["a"]

    def test_repr(self) -> None:
        registry = StepRegistry({"a": TrimWhitespace})
        assert repr(registry) == "StepRegistry(['a'])"
        registry.freeze()
        assert repr(registry) == "StepRegistry(['a'], frozen)"


class TestDefaultRegistry:
    """默认注册表测试。"""

    def test_execution_order(self) -> None:
        assert create_default_registry().names() == [
            "remove_control_chars",
            "remove_zero_width",
            "unicode_normalization",
            "fullwidth_to_halfwidth",
            "normalize_punctuations",
            "html_decode",
            "strip_html",
            "whitelist_html",
            "character_whitelist",
            "collapse_repeated_marks",
            "truncate_length",
            "collapse_spaces",
            "trim_whitespace",
            "visible_ratio_guard",
        ]

    def test_each_call_returns_fresh_registry(self) -> None:
        first = create_default_registry()
        first.register("shout", Shout)
        assert "shout" not in create_default_registry()
        assert len(create_default_registry()) == len(DEFAULT_STEPS)
