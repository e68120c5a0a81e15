"""
结构化异常体系：错误信息即文档。

每条异常遵循"三段式"规范：
1. What went wrong（发生了什么）
2. Why it happened（为什么发生）
3. How to fix it（怎么修）

只有配置类问题会以异常形式抛出。内容层面的问题（可见字符比例过低、
超长、含控制字符）不是异常：filter 返回清洗结果，validate 返回错误列表。

示例::

    PresetNotFoundError(
        what="未找到预设 'nick_name'。",
        why="该预设既不是内置预设，也没有在配置文件中声明。",
        how="可用预设：nickname, rich_text, safe, strict, username。",
        preset="nick_name",
    )
"""

from __future__ import annotations

from typing import Any


class TextGuardError(Exception):
    """
    Text Guard 异常基类。

    所有 Text Guard 异常都继承自此类，支持三段式错误消息。

    属性:
        what: 发生了什么
        why: 为什么发生
        how: 怎么修复
        details: 额外的上下文信息（用于调试）
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.what = what
        self.why = why
        self.how = how
        self.details = details or {}

        parts = [what]
        if why:
            parts.append(f"→ 原因：{why}")
        if how:
            parts.append(f"→ 修复建议：{how}")

        self.full_message = "\n".join(parts)
        super().__init__(self.full_message)

    def __str__(self) -> str:
        return self.full_message

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式，用于 JSON API 响应。"""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "what": self.what,
        }
        if self.why:
            result["why"] = self.why
        if self.how:
            result["how"] = self.how
        if self.details:
            result["details"] = self.details
        return result


# === 配置相关异常 ===


class ConfigValidationError(TextGuardError):
    """
    配置校验异常。

    当 YAML 配置文件结构错误或字段不合法时抛出。

    示例::

        raise ConfigValidationError(
            what="配置 'text_guard.yaml' 校验失败。",
            why="字段 'presets → safe' 应为字典，实际为 list。",
            how="每个预设必须是 步骤名 → 选项 的映射。",
            config_path="text_guard.yaml",
            field_path="presets.safe",
        )
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        config_path: str = "",
        field_path: str = "",
        **kwargs: Any,
    ) -> None:
        details = {
            "config_path": config_path,
            "field_path": field_path,
        }
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.config_path = config_path
        self.field_path = field_path


class ConfigLoadError(TextGuardError):
    """
    配置加载异常。

    当配置文件不存在、格式错误、无法解析，或其中的步骤导入路径无效时抛出。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        file_path: str = "",
        **kwargs: Any,
    ) -> None:
        details = {"file_path": file_path}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.file_path = file_path


class PresetNotFoundError(TextGuardError):
    """
    预设未找到异常。

    filter / build_pipeline 收到未知预设名时抛出。
    validate 不抛出此异常，而是返回 valid=False 的结果。
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        preset: str = "",
        available_presets: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        details: dict[str, Any] = {"preset": preset}
        if available_presets:
            details["available_presets"] = available_presets
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.preset = preset


# === 流水线相关异常 ===


class StepConfigurationError(TextGuardError):
    """
    步骤配置异常。

    已注册步骤的构造器拒绝了给定选项时抛出。在构建流水线时同步抛出，
    绝不会推迟到处理文本的过程中。

    示例::

        raise StepConfigurationError(
            what="步骤 'truncate_length' 构造失败。",
            why="max: Input should be greater than or equal to 0",
            how="检查预设中 'truncate_length' 的选项。",
            step_name="truncate_length",
            options={"max": -1},
        )
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        step_name: str = "",
        **kwargs: Any,
    ) -> None:
        details: dict[str, Any] = {"step_name": step_name}
        details.update(kwargs)
        super().__init__(what=what, why=why, how=how, details=details)
        self.step_name = step_name


# === 插件相关异常 ===


class PluginError(TextGuardError):
    """
    插件异常。

    当步骤注册失败（如构造器不可调用）时抛出。

    示例::

        raise PluginError(
            what="步骤 'custom_trim' 注册失败。",
            why="提供的构造器 'abc' 不可调用。",
            how="传入一个类或工厂函数，调用后返回 str -> str 的可调用对象。",
        )
    """

    pass


class RegistryFrozenError(PluginError):
    """
    注册表已冻结异常。

    在 StepRegistry.freeze() 之后继续调用 register() 时抛出。
    """

    pass
