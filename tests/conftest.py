"""
测试套件共享 Fixtures 和配置。

本文件定义了所有测试中可复用的 fixtures 和辅助函数。
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import yaml

from text_guard import TextGuard
from text_guard.config.defaults import create_default_registry
from text_guard.facade import set_default_guard
from text_guard.registry import StepRegistry


# === 全局状态隔离 ===


@pytest.fixture(autouse=True)
def reset_default_guard() -> Iterator[None]:
    """每个测试前后重置共享 TextGuard 实例，避免用例之间互相影响。"""
    set_default_guard(None)
    yield
    set_default_guard(None)


# === 核心对象 Fixtures ===


@pytest.fixture
def guard() -> TextGuard:
    """使用内置默认配置的 TextGuard。"""
    return TextGuard()


@pytest.fixture
def registry() -> StepRegistry:
    """包含全部内置步骤的注册表（未冻结）。"""
    return create_default_registry()


# === 配置文件 Fixtures ===


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """
    把配置字典写成 YAML 文件，返回文件路径。

    用法::

        path = write_config({"preset": "strict"})
        path = write_config("not: [valid", name="broken.yaml")
    """

    def _write(content: dict[str, Any] | str, name: str = "text_guard.yaml") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(
                yaml.safe_dump(content, allow_unicode=True, sort_keys=False),
                encoding="utf-8",
            )
        return path

    return _write


@pytest.fixture
def custom_config() -> dict[str, Any]:
    """带一个自定义预设和一个自定义步骤的配置字典。"""
    return {
        "version": "1.0",
        "preset": "comment",
        "presets": {
            "comment": {
                "strip_html": True,
                "collapse_spaces": True,
                "trim_whitespace": True,
                "truncate_length": {"max": 20},
            },
        },
        "steps": {
            "extra_trim": "text_guard.pipeline.whitespace:TrimWhitespace",
        },
    }

