"""
配置文件的 Schema 定义与校验。

YAML 配置文件示例::

    preset: safe
    presets:
      comment:
        trim_whitespace: true
        strip_html: true
        truncate_length: {max: 500}
    steps:
      strip_emoji: my_app.text_steps:StripEmoji

# [Design Decision] 预设内容本身只校验"是步骤名到配置值的映射"。
# 每个步骤的选项由步骤自己的选项模型校验，校验发生在构建流水线时，
# 这样自定义步骤也能享受同样的校验而无需在这里登记 Schema。
"""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from text_guard.config.defaults import DEFAULT_PRESET, PRESETS


class TextGuardConfig(BaseModel):
    """
    完整的 Text Guard 配置，对应 YAML 配置文件的根结构。

    - ``presets`` 中与内置预设同名的条目整体替换内置预设（不做合并）
    - ``steps`` 中的步骤按声明顺序追加到默认注册表末尾
    """

    model_config = ConfigDict(extra="forbid")

    version: str = Field(default="1.0", description="配置版本")
    preset: str = Field(default=DEFAULT_PRESET, description="默认预设名")
    presets: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="自定义预设：预设名 → (步骤名 → 配置值)",
    )
    steps: dict[str, str] = Field(
        default_factory=dict,
        description="自定义步骤：步骤名 → 导入路径 'module:attr'",
    )
    max_cached_pipelines: int = Field(
        default=128,
        gt=0,
        description="流水线缓存的最大条目数（LRU 淘汰）",
    )

    @field_validator("steps")
    @classmethod
    def _validate_import_paths(cls, value: dict[str, str]) -> dict[str, str]:
        for name, target in value.items():
            module, _, attr = target.partition(":")
            if not module.strip() or not attr.strip():
                raise ValueError(
                    f"步骤 '{name}' 的导入路径 '{target}' 无效，应为 'module:attr' 形式，"
                    f"例如 'my_app.text_steps:StripEmoji'。"
                )
        return value

    @model_validator(mode="after")
    def _validate_default_preset(self) -> TextGuardConfig:
        """校验默认预设存在于内置预设或自定义预设中。"""
        available = set(PRESETS) | set(self.presets)
        if self.preset not in available:
            raise ValueError(
                f"默认预设 '{self.preset}' 不存在。可用预设：{', '.join(sorted(available))}。"
            )
        return self

    def all_presets(self) -> dict[str, dict[str, Any]]:
        """内置预设与自定义预设合并后的完整预设表（深拷贝）。"""
        merged = copy.deepcopy(PRESETS)
        merged.update(copy.deepcopy(self.presets))
        return merged
