"""
内置预设端到端测试。

覆盖场景：
- 各预设的典型输入与输出
- 幂等性：对每个预设，filter(filter(x)) == filter(x)
- 执行顺序由注册表决定，与预设中键的书写顺序无关
- 空字符串与被闸门清空后的安全性
- 配置文件 → TextGuard → filter / validate 完整链路
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from text_guard import PRESETS, FieldGuard, Filtered, TextGuard

ZWSP = "\N{ZERO WIDTH SPACE}"
BOM = "\N{ZERO WIDTH NO-BREAK SPACE}"
LRM = "\N{LEFT-TO-RIGHT MARK}"
IDEOGRAPHIC_SPACE = "\N{IDEOGRAPHIC SPACE}"
GRINNING_FACE = "\U0001F600"

CORPUS = [
    "",
    "Hello World",
    "  Hello   World  ",
    f"pass{ZWSP}word{BOM}",
    "a\x00b\x07c",
    "ＵｓｅｒＮａｍｅ１２３！！！",
    f"你好，世界！{IDEOGRAPHIC_SPACE}今天天气不错。。。。",
    "<p>Hello <b>World</b></p>",
    '<script>alert("x")</script><p onclick="evil()">ok</p>',
    '<a href="javascript:alert(1)" title="t">link</a>',
    '<a href="https://example.com">safe link</a><br/>',
    "&lt;b&gt;bold&lt;/b&gt; &amp; more",
    f"Nice!!!! {GRINNING_FACE}{GRINNING_FACE} wow???",
    "a < b and c > d",
    "《script》alert(1)《/script》",
    "user__name--test..x",
    LRM * 6 + "ab",
    "x" * 120,
    "line one\nline two\ttabbed",
]


@pytest.fixture(scope="module")
def shared_guard() -> TextGuard:
    return TextGuard()


# ============================================================
# 预设示例
# ============================================================


class TestPresetExamples:
    """各预设的典型输入。"""

    def test_username_folds_fullwidth(self, shared_guard: TextGuard) -> None:
        assert shared_guard.filter("ＵｓｅｒＮａｍｅ１２３！！！", "username") == "UserName123!!!"

    def test_username_collapses_separators(self, shared_guard: TextGuard) -> None:
        assert shared_guard.filter("user__name--test..x", "username") == "user_name-test.x"

    def test_username_truncates(self, shared_guard: TextGuard) -> None:
        assert shared_guard.filter("x" * 120, "username") == "x" * 50

    def test_username_cjk_brackets_never_become_markup(self, shared_guard: TextGuard) -> None:
        """《》 先归一化为 <>，再由 strip_html 剥离，输出中不会出现标签。"""
        result = shared_guard.filter("《script》alert(1)《/script》", "username")
        assert "<script>" not in result
        assert result == "alert(1)"

    def test_rich_text_keeps_safe_tags(self, shared_guard: TextGuard) -> None:
        result = shared_guard.filter("<script>alert(1)</script><p>ok</p>", "rich_text")
        assert "<p>ok</p>" in result
        assert "<script>" not in result

    def test_rich_text_drops_event_handlers(self, shared_guard: TextGuard) -> None:
        result = shared_guard.filter('<p onclick="evil()">ok</p>', "rich_text")
        assert result == "<p>ok</p>"

    def test_safe_strips_invisible_and_html(self, shared_guard: TextGuard) -> None:
        text = f"  <b>pass{ZWSP}word</b>\x00  "
        assert shared_guard.filter(text, "safe") == "password"

    def test_strict_decodes_then_strips(self, shared_guard: TextGuard) -> None:
        result = shared_guard.filter("&lt;b&gt;bold&lt;/b&gt; text", "strict")
        assert result == "bold text"

    def test_strict_removes_emoji(self, shared_guard: TextGuard) -> None:
        assert shared_guard.filter(f"Nice {GRINNING_FACE}", "strict") == "Nice"

    def test_nickname_keeps_emoji_and_truncates(self, shared_guard: TextGuard) -> None:
        result = shared_guard.filter(f"小明{GRINNING_FACE}" + "a" * 40, "nickname")
        assert result.startswith(f"小明{GRINNING_FACE}")
        assert len(result) == 30

    def test_rejected_text_is_empty(self, shared_guard: TextGuard) -> None:
        assert shared_guard.filter(LRM * 6 + "ab", "safe") == ""
        assert not shared_guard.validate(LRM * 6 + "ab", "safe").valid


# ============================================================
# 不变量
# ============================================================


class TestIdempotence:
    """已清洗的文本是不动点。"""

    @pytest.mark.parametrize("preset", sorted(PRESETS))
    @pytest.mark.parametrize("text", CORPUS)
    def test_filter_twice_equals_once(
        self, shared_guard: TextGuard, preset: str, text: str
    ) -> None:
        once = shared_guard.filter(text, preset)
        assert shared_guard.filter(once, preset) == once


class TestOrderInsensitivity:
    """预设中键的顺序不影响结果。"""

    @pytest.mark.parametrize("preset", sorted(PRESETS))
    def test_reversed_declaration_same_output(self, preset: str) -> None:
        reversed_preset = dict(reversed(list(PRESETS[preset].items())))
        guard = TextGuard.from_config({"presets": {"reversed": reversed_preset}})

        for text in CORPUS:
            assert guard.filter(text, "reversed") == guard.filter(text, preset)


class TestEmptyInput:
    """空字符串对所有预设都是安全的。"""

    @pytest.mark.parametrize("preset", sorted(PRESETS))
    def test_empty_string(self, shared_guard: TextGuard, preset: str) -> None:
        assert shared_guard.filter("", preset) == ""
        assert shared_guard.validate("", preset).valid


# ============================================================
# 完整链路
# ============================================================


class TestConfigFileFlow:
    """配置文件 → TextGuard → 规则与字段清洗。"""

    def test_custom_preset_and_step(self, write_config: Callable[..., Path]) -> None:
        path = write_config({
            "preset": "title",
            "presets": {
                "title": {
                    "strip_html": True,
                    "collapse_spaces": True,
                    "trim_whitespace": True,
                    "truncate_length": {"max": 10},
                    "shout": True,
                },
            },
            "steps": {"shout": "tests_support_steps:Shout"},
        })
        support = path.parent / "tests_support_steps.py"
        support.write_text(
            "class Shout:\n"
            "    name = 'Shout'\n"
            "\n"
            "    def __call__(self, text):\n"
            "        return text.upper()\n",
            encoding="utf-8",
        )

        with pytest.MonkeyPatch.context() as mp:
            mp.syspath_prepend(str(path.parent))
            guard = TextGuard.from_file(path)

        assert guard.list_steps()[-1] == "shout"
        assert guard.filter("<i>hello</i> world  ") == "HELLO WORL"

        result = guard.validate("x" * 11)
        assert result.errors == ["Text length (11) exceeds maximum allowed (10)"]

        assert Filtered("title", guard=guard).check("<b>hi</b>").value == "HI"

        fields = FieldGuard({"title": "title", "body": "safe"}, guard=guard)
        assert fields.apply({"title": "new post", "body": " <p>text</p> "}) == {
            "title": "NEW POST",
            "body": "text",
        }
