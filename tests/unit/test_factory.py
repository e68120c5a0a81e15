"""
流水线工厂单元测试。

覆盖范围:
- factory.py: resolve_spec 四种变体、construct_step、PipelineFactory.build
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from text_guard.errors import StepConfigurationError
from text_guard.factory import (
    Absent,
    Enabled,
    Options,
    PipelineFactory,
    Scalar,
    construct_step,
    resolve_spec,
)
from text_guard.pipeline import NormalizeUnicode, TrimWhitespace, TruncateLength
from text_guard.registry import StepRegistry


class TestResolveSpec:
    """resolve_spec 测试。"""

    @pytest.mark.parametrize("raw", [None, False, "", 0, 0.0, [], {}])
    def test_absent(self, raw: Any) -> None:
        assert resolve_spec(raw) == Absent()

    def test_enabled(self) -> None:
        assert resolve_spec(True) == Enabled()

    @pytest.mark.parametrize("raw", ["NFKC", 50, 0.8, ["p", "b"]])
    def test_scalar(self, raw: Any) -> None:
        assert resolve_spec(raw) == Scalar(raw)

    def test_marker_mapping_is_scalar(self) -> None:
        assert resolve_spec({"value": 50}) == Scalar(50)

    def test_options(self) -> None:
        assert resolve_spec({"max": 50}) == Options({"max": 50})

    def test_marker_with_other_keys_is_options(self) -> None:
        raw = {"value": 1, "max": 2}
        assert resolve_spec(raw) == Options(raw)

    def test_one_is_scalar_not_enabled(self) -> None:
        """只有布尔 True 表示启用，整数 1 是单值。"""
        assert resolve_spec(1) == Scalar(1)


class TestConstructStep:
    """construct_step 测试。"""

    def test_absent_returns_none(self) -> None:
        assert construct_step("truncate_length", TruncateLength, Absent()) is None

    def test_enabled_uses_defaults(self) -> None:
        step = construct_step("truncate_length", TruncateLength, Enabled())
        assert step.options.max == 5000

    def test_scalar_and_options(self) -> None:
        assert construct_step("t", TruncateLength, Scalar(5)).options.max == 5
        assert construct_step("t", TruncateLength, Options({"max": 6})).options.max == 6

    def test_invalid_options_raise_step_configuration_error(self) -> None:
        with pytest.raises(StepConfigurationError) as exc_info:
            construct_step("truncate_length", TruncateLength, Options({"max": -1}))

        error = exc_info.value
        assert error.step_name == "truncate_length"
        assert error.details["options"] == {"max": -1}
        assert "max" in error.why

    def test_constructor_value_error_wrapped(self) -> None:
        def picky(value: Any = None) -> Any:
            raise ValueError("不接受该值")

        with pytest.raises(StepConfigurationError, match="不接受该值"):
            construct_step("picky", picky, Scalar("x"))

    def test_non_callable_result(self) -> None:
        with pytest.raises(StepConfigurationError, match="不可调用"):
            construct_step("broken", lambda: 42, Enabled())


class TestPipelineFactory:
    """PipelineFactory 测试。"""

    def test_registry_order_not_declaration_order(self, registry: StepRegistry) -> None:
        factory = PipelineFactory(registry)
        forward = factory.build({"trim_whitespace": True, "truncate_length": 3})
        backward = factory.build({"truncate_length": 3, "trim_whitespace": True})

        assert forward.names == ["TruncateLength(3)", "TrimWhitespace"]
        assert backward.names == forward.names

    def test_absent_steps_skipped(self, registry: StepRegistry) -> None:
        pipeline = PipelineFactory(registry).build(
            {"trim_whitespace": True, "strip_html": False, "truncate_length": 0}
        )
        assert pipeline.names == ["TrimWhitespace"]

    def test_unknown_steps_ignored(
        self, registry: StepRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="text_guard.factory"):
            pipeline = PipelineFactory(registry).build(
                {"trim_whitespace": True, "from_the_future": {"x": 1}}
            )

        assert pipeline.names == ["TrimWhitespace"]
        assert "from_the_future" in caplog.text

    def test_all_spec_shapes(self, registry: StepRegistry) -> None:
        pipeline = PipelineFactory(registry).build(
            {
                "unicode_normalization": {"value": "NFC"},
                "truncate_length": {"max": 8},
                "collapse_spaces": True,
                "visible_ratio_guard": 0.5,
            }
        )
        assert pipeline.names == [
            "NormalizeUnicode(NFC)",
            "TruncateLength(8)",
            "CollapseSpaces",
            "VisibleRatioGuard(0.5)",
        ]

    @pytest.mark.parametrize(
        "name",
        [
            "trim_whitespace",
            "collapse_spaces",
            "remove_control_chars",
            "remove_zero_width",
            "strip_html",
        ],
    )
    @pytest.mark.parametrize("raw", [{"enabled": True}, {"value": 1}, "yes", 3])
    def test_optionless_steps_accept_any_shape(
        self, registry: StepRegistry, name: str, raw: Any
    ) -> None:
        """无选项步骤对映射、单值配置同样可以构建，多余的键被忽略。"""
        pipeline = PipelineFactory(registry).build({name: raw})
        assert len(pipeline) == 1

    def test_optionless_step_override_behaviour(self, registry: StepRegistry) -> None:
        pipeline = PipelineFactory(registry).build(
            {"trim_whitespace": {"enabled": True}, "strip_html": {"value": 1}}
        )
        assert pipeline.names == ["StripHtml", "TrimWhitespace"]
        assert pipeline("  <b>a</b>  ") == "a"

    def test_invalid_options_fail_at_build(self, registry: StepRegistry) -> None:
        with pytest.raises(StepConfigurationError) as exc_info:
            PipelineFactory(registry).build({"unicode_normalization": "NFX"})
        assert exc_info.value.step_name == "unicode_normalization"

    def test_custom_registry(self) -> None:
        registry = StepRegistry({"nfkc": NormalizeUnicode, "trim": TrimWhitespace})
        pipeline = PipelineFactory(registry).build({"trim": True, "nfkc": True})
        assert pipeline(" ＡＢＣ ") == "ABC"

    def test_empty_specs(self, registry: StepRegistry) -> None:
        pipeline = PipelineFactory(registry).build({})
        assert len(pipeline) == 0
        assert pipeline(" x ") == " x "
