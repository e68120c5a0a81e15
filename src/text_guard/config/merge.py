"""
预设配置与调用方覆盖项的合并。

合并规则（纯函数，不修改任何输入）：

- 两侧都是映射 → 递归合并
- 两侧都是列表（或元组）→ 拼接，基础值在前、覆盖值在后
- 其他情况 → 覆盖值胜出（包括 False，可用于关闭某个步骤）
- 只出现在一侧的键原样复制

示例::

    merge_specs(
        {"truncate_length": {"max": 5000}, "strip_html": True},
        {"truncate_length": {"max": 50}, "strip_html": False},
    )
    # {'truncate_length': {'max': 50}, 'strip_html': False}
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


def merge_specs(base: Mapping[str, Any], overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """深度合并预设配置与覆盖项，返回新字典。"""
    result = copy.deepcopy(dict(base))
    for key, value in (overrides or {}).items():
        result[key] = _merge_value(result[key], value) if key in result else copy.deepcopy(value)
    return result


def _merge_value(base: Any, override: Any) -> Any:
    if isinstance(base, Mapping) and isinstance(override, Mapping):
        return merge_specs(base, override)
    if isinstance(base, (list, tuple)) and isinstance(override, (list, tuple)):
        return [*base, *copy.deepcopy(list(override))]
    return copy.deepcopy(override)
