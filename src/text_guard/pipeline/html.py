"""HTML 相关清洗步骤：实体解码、标签剥离、标签白名单。

# [Design Decision] 使用正则而非 HTML 解析器，只处理"看起来像标签"的片段，
# 不构建 DOM。对精心构造的畸形标记不做保证；需要完整语义的富文本场景
# 应在输出端再使用树形解析的清洗器。
"""

from __future__ import annotations

import html
import logging
import re
from typing import Any
from urllib.parse import urlsplit

from pydantic import field_validator

from text_guard.pipeline.base import NoOptions, StepOptions

logger = logging.getLogger(__name__)

_COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)
# 以字母、/字母、! 或 ? 开头的才算标签，"a < b"、"I <3 you" 保持原样
_ANY_TAG_PATTERN = re.compile(r"<(?:/?[A-Za-z]|[!?])[^>]*>")
# 优先按元素解析（属性值的引号内允许出现 ">"），解析不了的标签整体移除
_MARKUP_PATTERN = re.compile(
    r"""<(/?)([A-Za-z][A-Za-z0-9-]*)((?:[^>"']|"[^"]*"|'[^']*')*)>"""
    r"""|<(?:/?[A-Za-z]|[!?])[^>]*>"""
)
_ATTRIBUTE_PATTERN = re.compile(
    r"""([A-Za-z_:][-A-Za-z0-9_:.]*)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'=<>`]+)))?"""
)

DEFAULT_ALLOWED_TAGS = (
    "p", "b", "i", "u", "a", "ul", "ol", "li", "code", "pre",
    "br", "blockquote", "h1", "h2", "h3",
)
DEFAULT_ALLOWED_ATTRS = ("href", "title", "rel")
DEFAULT_ALLOWED_PROTOCOLS = ("http", "https", "mailto")


def _until_stable(func: Any, text: str) -> str:
    """反复执行 func 直到输出不再变化。

    每一轮都严格缩短文本（或不变即退出），循环次数不超过文本长度。
    """
    previous = None
    while previous != text:
        previous = text
        text = func(text)
    return text


class HtmlDecodeOptions(StepOptions):
    """HtmlDecode 选项。"""

    scalar_field = "enabled"

    enabled: bool = True


class HtmlDecode:
    """解码 HTML 命名实体和数字实体（含 &quot; / &#039;）。

    Examples:
        >>> HtmlDecode()("&lt;b&gt; &quot;x&quot; &#39;y&#39;")
        '<b> "x" \\'y\\''
    """

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = HtmlDecodeOptions.resolve(options, **kwargs)

    @property
    def name(self) -> str:
        return "HtmlDecode" if self.options.enabled else "HtmlDecode(disabled)"

    def __call__(self, text: str) -> str:
        if not self.options.enabled or "&" not in text:
            return text
        return html.unescape(text)


class StripHtml:
    """移除全部标签和注释，仅保留文本内容。

    标签被移除后可能拼出新的标签（如 ``<<b>script>``），
    因此重复剥离直到结果稳定。

    Examples:
        >>> StripHtml()("<p>Hello <b>World</b></p>")
        'Hello World'
    """

    name = "StripHtml"

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = NoOptions.resolve(options, **kwargs)

    def __call__(self, text: str) -> str:
        if "<" not in text:
            return text
        return _until_stable(self._strip_once, text)

    @staticmethod
    def _strip_once(text: str) -> str:
        text = _COMMENT_PATTERN.sub("", text)
        return _ANY_TAG_PATTERN.sub("", text)


class WhitelistHtmlOptions(StepOptions):
    """WhitelistHtml 选项。标签名、属性名、协议名均不区分大小写。"""

    scalar_field = "tags"

    tags: tuple[str, ...] = DEFAULT_ALLOWED_TAGS
    attrs: tuple[str, ...] = DEFAULT_ALLOWED_ATTRS
    protocols: tuple[str, ...] = DEFAULT_ALLOWED_PROTOCOLS

    @field_validator("tags", "attrs", "protocols", mode="after")
    @classmethod
    def _lowercase(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(item.strip().lower() for item in value)


class WhitelistHtml:
    """HTML 标签白名单。

    - 不在 ``tags`` 中的标签被移除（标签本身移除，内部文本保留）
    - 保留的标签上，不在 ``attrs`` 中的属性一律移除
    - ``attrs`` 中的属性仅当取值为 URL 且协议在 ``protocols`` 中时保留；
      无协议或协议不在白名单时移除该属性，标签本身保留
    - 注释、``<!DOCTYPE>``、``<?xml?>`` 一律移除

    保留下来的标签会被重新序列化为规范形式（小写标签名、双引号属性值），
    因此对同一输出重复执行结果不变。

    Examples:
        >>> step = WhitelistHtml(tags=["p", "a"], attrs=["href"], protocols=["https"])
        >>> step('<p onclick="x()">hi <a href="javascript:alert(1)">x</a><script>y</script></p>')
        '<p>hi <a>x</a>y</p>'
    """

    def __init__(self, options: Any = None, **kwargs: Any) -> None:
        self.options = WhitelistHtmlOptions.resolve(options, **kwargs)
        self._tags = frozenset(self.options.tags)
        self._attrs = frozenset(self.options.attrs)
        self._protocols = frozenset(self.options.protocols)

    @property
    def name(self) -> str:
        return f"WhitelistHtml({len(self.options.tags)} tags)"

    def __call__(self, text: str) -> str:
        if "<" not in text:
            return text
        return _until_stable(self._filter_once, text)

    def _filter_once(self, text: str) -> str:
        text = _COMMENT_PATTERN.sub("", text)
        return _MARKUP_PATTERN.sub(self._rewrite_element, text)

    def _rewrite_element(self, match: re.Match[str]) -> str:
        if match.group(2) is None:
            return ""
        closing, tag, rest = match.group(1), match.group(2).lower(), match.group(3)
        if tag not in self._tags:
            return ""
        if closing:
            return f"</{tag}>"

        attributes = "".join(self._kept_attributes(rest))
        self_closing = " /" if rest.rstrip().endswith("/") else ""
        return f"<{tag}{attributes}{self_closing}>"

    def _kept_attributes(self, raw: str) -> list[str]:
        kept: list[str] = []
        for match in _ATTRIBUTE_PATTERN.finditer(raw.rstrip("/ \t\r\n")):
            attr = match.group(1).lower()
            if attr not in self._attrs:
                continue

            value = next((g for g in match.group(2, 3, 4) if g is not None), None)
            if value is None or not self._is_allowed_url(value):
                logger.debug("WhitelistHtml 移除属性 %s=%r", attr, value)
                continue

            quote = "'" if '"' in value else '"'
            kept.append(f" {attr}={quote}{value}{quote}")
        return kept

    def _is_allowed_url(self, value: str) -> bool:
        try:
            scheme = urlsplit(value.strip()).scheme
        except ValueError:
            return False
        return bool(scheme) and scheme.lower() in self._protocols
