"""
描述: WPF -> AvaloniaUI 迁移指南资源
主要功能:
    - 完整迁移指南
    - 控件映射表
    - 命名空间与绑定变化
    - 迁移步骤
"""

from __future__ import annotations

from typing import Any

from avalonia_mcp.resources.base import KnowledgeResource, bullet_list


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


# region 分段格式化
def format_changes(section: dict[str, Any], with_note: bool = False) -> str:
    lines: list[str] = []
    if section.get("description"):
        lines += [str(section["description"]), ""]
    for change in _as_list(section.get("changes")):
        change = _as_dict(change)
        if not all(key in change for key in ("from", "to", "description")):
            continue
        lines += [
            f"**{change['description']}**",
            f"- From: `{change['from']}`",
            f"- To: `{change['to']}`",
        ]
        if with_note and change.get("note"):
            lines.append(f"- Note: {change['note']}")
        lines.append("")
    return "\n".join(lines) + "\n" if lines else ""


def format_control_mappings(mappings: dict[str, Any]) -> str:
    lines: list[str] = []
    available = _as_list(mappings.get("available_controls"))
    if available:
        lines += [
            "### Available Controls",
            "",
            "| WPF Control | AvaloniaUI Control | Compatibility | Notes |",
            "|-------------|-------------------|---------------|-------|",
        ]
        for control in available:
            control = _as_dict(control)
            lines.append(
                f"| {control.get('wpf_control', '')} | {control.get('avalonia_control', '')} "
                f"| {control.get('compatibility', '')} | {control.get('notes', '')} |"
            )
        lines.append("")
    unavailable = _as_list(mappings.get("unavailable_controls"))
    if unavailable:
        lines += ["### Unavailable Controls", ""]
        for control in unavailable:
            control = _as_dict(control)
            lines += [
                f"**{control.get('wpf_control', '')}**",
                f"- Alternative: {control.get('alternative', '')}",
                f"- Notes: {control.get('notes', '')}",
                "",
            ]
    return "\n".join(lines) + "\n" if lines else ""


def format_binding_changes(bindings: dict[str, Any]) -> str:
    lines: list[str] = []
    compatible = _as_list(bindings.get("compatible_bindings"))
    if compatible:
        lines += [
            "### Compatible Bindings",
            "",
            "The following WPF binding syntaxes work in AvaloniaUI:",
            "",
            *bullet_list(compatible, code=True),
            "",
        ]
    changed = _as_list(bindings.get("unsupported_bindings"))
    if changed:
        lines += ["### Changed Bindings", ""]
        for binding in changed:
            binding = _as_dict(binding)
            lines += [
                f"**WPF:** `{binding.get('wpf_syntax', '')}`",
                f"**AvaloniaUI:** `{binding.get('avalonia_alternative', '')}`",
                f"**Notes:** {binding.get('notes', '')}",
                "",
            ]
    return "\n".join(lines) + "\n" if lines else ""


def format_styling_changes(styling: dict[str, Any]) -> str:
    lines: list[str] = []
    if styling.get("description"):
        lines += [str(styling["description"]), ""]
    if styling.get("wpf_style") and styling.get("avalonia_style"):
        lines += [
            f"**WPF:** `{styling['wpf_style']}`",
            f"**AvaloniaUI:** `{styling['avalonia_style']}`",
            "",
        ]
    examples = _as_list(styling.get("selector_examples"))
    if examples:
        lines += ["**Selector Examples:**", *bullet_list(examples, code=True), ""]
    return "\n".join(lines) + "\n" if lines else ""


def format_migration_steps(steps: list[Any]) -> str:
    lines: list[str] = []
    for step in steps:
        step = _as_dict(step)
        lines += [
            f"{step.get('step', 0)}. **{step.get('action', '')}**",
            f"   {step.get('description', '')}",
            "",
        ]
    return "\n".join(lines) + "\n" if lines else ""
# endregion


# region 整体输出
_GUIDE_SECTIONS = (
    ("namespace_changes", "Namespace Changes", lambda data: format_changes(_as_dict(data))),
    ("file_extensions", "File Extension Changes", lambda data: format_changes(_as_dict(data), with_note=True)),
    ("control_mappings", "Control Compatibility", lambda data: format_control_mappings(_as_dict(data))),
    ("binding_changes", "Data Binding Changes", lambda data: format_binding_changes(_as_dict(data))),
    ("styling_changes", "Styling System Changes", lambda data: format_styling_changes(_as_dict(data))),
    ("common_migration_steps", "Migration Process", lambda data: format_migration_steps(_as_list(data))),
)


def format_migration_guide(migration: dict[str, Any]) -> str:
    parts = [
        "# WPF to AvaloniaUI Migration Guide\n\n",
        "This comprehensive guide will help you migrate your WPF applications to AvaloniaUI.\n\n",
    ]
    for key, title, formatter in _GUIDE_SECTIONS:
        if key in migration:
            parts.append(f"## {title}\n\n{formatter(migration[key])}\n")
    return "".join(parts)


def format_control_mappings_page(migration: dict[str, Any]) -> str:
    body = format_control_mappings(_as_dict(migration.get("control_mappings")))
    return "# WPF to AvaloniaUI Control Mappings\n\n" + body


def format_namespace_and_binding_changes(migration: dict[str, Any]) -> str:
    parts = ["# Namespace and Binding Changes\n\n"]
    if "namespace_changes" in migration:
        parts.append("## Namespace Changes\n\n" + format_changes(_as_dict(migration["namespace_changes"])) + "\n")
    if "binding_changes" in migration:
        parts.append("## Binding Changes\n\n" + format_binding_changes(_as_dict(migration["binding_changes"])))
    return "".join(parts)


def format_migration_steps_page(migration: dict[str, Any]) -> str:
    body = format_migration_steps(_as_list(migration.get("common_migration_steps")))
    return "# Migration Process Steps\n\n" + body
# endregion


class MigrationGuideResource(KnowledgeResource):
    """迁移指南 (migration-guide.json)"""
    file_name = "migration-guide.json"
    root_key = "wpf_to_avalonia_migration"

    async def guide(self) -> str:
        return await self.cached("formatted_migration_guide", format_migration_guide)

    async def control_mappings(self) -> str:
        return await self.cached("migration:control_mappings", format_control_mappings_page)

    async def namespace_and_binding_changes(self) -> str:
        return await self.cached("migration:namespace_binding_changes", format_namespace_and_binding_changes)

    async def migration_steps(self) -> str:
        return await self.cached("migration:steps", format_migration_steps_page)
