"""
按字段自动清洗记录。

FieldGuard 声明"哪些字段用哪个预设"，在保存记录前调用 ``apply()``：
只清洗存在、非 None、且相对原值发生变化的字段。
适用于 ORM 的 before-save 钩子、表单提交处理等场景。

字段声明支持三种形式::

    # 1. 字段列表：全部使用默认预设
    FieldGuard(["name", "bio"], default_preset="safe")

    # 2. 字段 → 预设映射
    FieldGuard({"name": "username", "bio": "safe"})

    # 3. 混合：字段名与 (字段, 预设) 对 / 单键映射
    FieldGuard(["name", ("bio", "safe"), {"homepage": "rich_text"}], default_preset="username")

声明中不存在的预设名会回退到默认预设。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from text_guard.facade import TextGuard, get_default_guard

logger = logging.getLogger(__name__)

FieldSpec = Mapping[str, Any] | Iterable[Any]


class FieldGuard:
    """
    记录字段清洗器。

    参数:
        fields: 字段声明（列表 / 映射 / 混合序列）
        default_preset: 未指定预设或预设无效时使用的预设
        guard: TextGuard 实例。None 时使用共享默认实例
    """

    def __init__(
        self,
        fields: FieldSpec = (),
        default_preset: str = "safe",
        guard: TextGuard | None = None,
    ) -> None:
        self.default_preset = default_preset
        self._guard = guard
        self._fields: dict[str, Any] = _parse_fields(fields)

    @property
    def guard(self) -> TextGuard:
        return self._guard if self._guard is not None else get_default_guard()

    def normalized_fields(self) -> dict[str, str]:
        """返回 字段 → 实际使用的预设 映射。"""
        valid = set(self.guard.list_presets())
        normalized: dict[str, str] = {}
        for field_name, preset in self._fields.items():
            if isinstance(preset, str) and preset in valid:
                normalized[field_name] = preset
            else:
                if preset is not None:
                    logger.debug(
                        "字段 '%s' 的预设 %r 不存在，使用默认预设 '%s'",
                        field_name, preset, self.default_preset,
                    )
                normalized[field_name] = self.default_preset
        return normalized

    def field_names(self) -> list[str]:
        return list(self._fields)

    def add_field(self, field_name: str, preset: str | None = None) -> FieldGuard:
        """添加（或更新）字段声明，返回自身以便链式调用。"""
        self._fields[field_name] = preset
        return self

    def remove_field(self, field_name: str) -> FieldGuard:
        """移除字段声明，字段不存在时无操作。"""
        self._fields.pop(field_name, None)
        return self

    def apply(
        self,
        values: Mapping[str, Any],
        original: Mapping[str, Any] | None = None,
        *,
        enabled: bool = True,
    ) -> dict[str, Any]:
        """
        清洗记录中声明的字段，返回新字典（不修改输入）。

        参数:
            values: 待保存的字段值
            original: 记录的原值。None 表示新记录，所有存在的字段都会被清洗
            enabled: 为 False 时原样返回副本（如数据迁移、批量导入时关闭清洗）
        """
        result = dict(values)
        if not enabled:
            return result

        for field_name, preset in self.normalized_fields().items():
            if field_name not in result or result[field_name] is None:
                continue
            current = result[field_name]
            if original is not None and field_name in original and original[field_name] == current:
                continue
            result[field_name] = self.guard.filter(str(current), preset)

        return result

    def filter_field(
        self,
        values: Mapping[str, Any],
        field_name: str,
        preset: str | None = None,
    ) -> str:
        """
        手动清洗单个字段的值。字段缺失或为 None 时返回空字符串。

        异常:
            PresetNotFoundError: 显式传入的预设不存在
        """
        value = values.get(field_name)
        if value is None:
            return ""
        return self.guard.filter(str(value), preset or self.default_preset)

    def __repr__(self) -> str:
        return f"FieldGuard({self._fields!r}, default_preset={self.default_preset!r})"


def _parse_fields(fields: FieldSpec) -> dict[str, Any]:
    """把三种字段声明形式统一为 字段 → 预设（None 表示默认）。"""
    if isinstance(fields, str):
        return {fields: None}
    if isinstance(fields, Mapping):
        return dict(fields)

    parsed: dict[str, Any] = {}
    for item in fields:
        if isinstance(item, str):
            parsed[item] = None
        elif isinstance(item, Mapping):
            parsed.update(item)
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            parsed[item[0]] = item[1]
        else:
            raise TypeError(
                f"无法识别的字段声明 {item!r}：应为字段名、(字段, 预设) 或 {{字段: 预设}}。"
            )
    return parsed
