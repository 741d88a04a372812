"""
描述: AvaloniaUI 控件参考资源
主要功能:
    - 全量控件参考 (按分类输出 markdown)
    - 单个控件查询 (名称不区分大小写)
"""

from __future__ import annotations

from typing import Any

from avalonia_mcp.resources.base import KnowledgeResource, bullet_list, format_title, normalize_name


def format_control(name: str, data: dict[str, Any]) -> str:
    lines = [f"### {name}", ""]
    if data.get("description"):
        lines += [f"**Description:** {data['description']}", ""]
    if data.get("usage"):
        lines += [f"**Usage:** {data['usage']}", ""]
    properties = data.get("properties")
    if isinstance(properties, list) and properties:
        lines += ["**Key Properties:**", *bullet_list(properties), ""]
    if data.get("xaml_example"):
        lines += ["**XAML Example:**", "```xml", str(data["xaml_example"]), "```", ""]
    return "\n".join(lines) + "\n"


def format_controls_reference(controls: dict[str, Any]) -> str:
    parts = ["# AvaloniaUI Controls Reference\n\n"]
    for category, members in controls.items():
        if not isinstance(members, dict):
            continue
        parts.append(f"## {format_title(category)}\n\n")
        for name, data in members.items():
            parts.append(format_control(name, data if isinstance(data, dict) else {}))
            parts.append("\n---\n\n")
    return "".join(parts)


def find_control(controls: dict[str, Any], control_name: str) -> str | None:
    target = normalize_name(control_name)
    for members in controls.values():
        if not isinstance(members, dict):
            continue
        for name, data in members.items():
            if name.lower() == target:
                return format_control(name, data if isinstance(data, dict) else {})
    return None


class ControlsResource(KnowledgeResource):
    """控件参考 (controls.json)"""
    file_name = "controls.json"
    root_key = "avaloniaui_controls"

    async def reference(self) -> str:
        return await self.cached("formatted_controls", format_controls_reference)

    async def control_info(self, control_name: str) -> str:
        key = f"control:{normalize_name(control_name)}"
        return await self.cached_item(
            key,
            lambda controls: find_control(controls, control_name),
            f"Control '{control_name}' not found in the reference",
        )
