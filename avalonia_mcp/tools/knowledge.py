"""
描述: AvaloniaUI 知识库工具
主要功能:
    - 控件参考与单控件查询
    - XAML 模式列表、单模式查询、MVVM 子集
    - WPF 迁移指南及其分段 (控件映射、命名空间与绑定、迁移步骤)
"""

from __future__ import annotations

from typing import Any

from avalonia_mcp.resources import ControlsResource, MigrationGuideResource, XamlPatternsResource
from avalonia_mcp.tools.base import BaseTool
from avalonia_mcp.tools.registry import ToolRegistry


def _required_text(params: dict[str, Any], key: str) -> str:
    value = str(params.get(key) or "").strip()
    if not value:
        raise ValueError(f"Parameter '{key}' is required")
    return value


class _KnowledgeTool(BaseTool):
    """知识库工具公共基类"""

    def controls(self) -> ControlsResource:
        return ControlsResource(self.context.cache, self.context.data_dir)

    def xaml_patterns(self) -> XamlPatternsResource:
        return XamlPatternsResource(self.context.cache, self.context.data_dir)

    def migration_guide(self) -> MigrationGuideResource:
        return MigrationGuideResource(self.context.cache, self.context.data_dir)


# region 控件参考
@ToolRegistry.register
class ControlsReferenceTool(_KnowledgeTool):
    name = "avalonia.v1.controls.reference"
    description = "Comprehensive reference of AvaloniaUI controls with examples and usage guidelines."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"content": await self.controls().reference()}


@ToolRegistry.register
class ControlInfoTool(_KnowledgeTool):
    name = "avalonia.v1.controls.get"
    description = "Get information about a specific AvaloniaUI control."
    parameters = {
        "type": "object",
        "properties": {"control_name": {"type": "string"}},
        "required": ["control_name"],
    }

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        control_name = _required_text(params, "control_name")
        return {"content": await self.controls().control_info(control_name)}
# endregion


# region XAML 模式
@ToolRegistry.register
class XamlPatternsTool(_KnowledgeTool):
    name = "avalonia.v1.xaml_patterns.list"
    description = "Common XAML patterns and templates for AvaloniaUI development."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"content": await self.xaml_patterns().patterns()}


@ToolRegistry.register
class XamlPatternTool(_KnowledgeTool):
    name = "avalonia.v1.xaml_patterns.get"
    description = "Get a specific XAML pattern by name."
    parameters = {
        "type": "object",
        "properties": {"pattern_name": {"type": "string"}},
        "required": ["pattern_name"],
    }

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        pattern_name = _required_text(params, "pattern_name")
        return {"content": await self.xaml_patterns().pattern(pattern_name)}


@ToolRegistry.register
class MvvmPatternsTool(_KnowledgeTool):
    name = "avalonia.v1.xaml_patterns.mvvm"
    description = "Get XAML patterns for MVVM development."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"content": await self.xaml_patterns().mvvm_patterns()}
# endregion


# region 迁移指南
@ToolRegistry.register
class MigrationGuideTool(_KnowledgeTool):
    name = "avalonia.v1.migration.guide"
    description = "Complete guide for migrating from WPF to AvaloniaUI."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"content": await self.migration_guide().guide()}


@ToolRegistry.register
class ControlMappingsTool(_KnowledgeTool):
    name = "avalonia.v1.migration.control_mappings"
    description = "Get control mapping information from WPF to AvaloniaUI."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"content": await self.migration_guide().control_mappings()}


@ToolRegistry.register
class NamespaceBindingChangesTool(_KnowledgeTool):
    name = "avalonia.v1.migration.namespace_binding_changes"
    description = "Get namespace and binding changes needed for WPF to AvaloniaUI migration."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"content": await self.migration_guide().namespace_and_binding_changes()}


@ToolRegistry.register
class MigrationStepsTool(_KnowledgeTool):
    name = "avalonia.v1.migration.steps"
    description = "Get step-by-step migration process from WPF to AvaloniaUI."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        return {"content": await self.migration_guide().migration_steps()}
# endregion
