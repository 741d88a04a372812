"""
描述: AvaloniaUI XAML 模式资源
主要功能:
    - 全部 XAML 模式列表
    - 按 key 或显示名称查询单个模式
    - MVVM 相关模式子集
"""

from __future__ import annotations

from typing import Any

from avalonia_mcp.resources.base import KnowledgeResource, bullet_list, normalize_name


MVVM_PATTERNS = ("mvvm_window", "data_binding")


def format_pattern(pattern: dict[str, Any]) -> str:
    lines: list[str] = []
    if pattern.get("name"):
        lines += [f"## {pattern['name']}", ""]
    if pattern.get("description"):
        lines += [f"**Description:** {pattern['description']}", ""]
    if pattern.get("xaml"):
        lines += ["**XAML:**", "```xml", str(pattern["xaml"]), "```", ""]
    key_points = pattern.get("key_points")
    if isinstance(key_points, list) and key_points:
        lines += ["**Key Points:**", *bullet_list(key_points), ""]
    return "\n".join(lines) + "\n"


def format_xaml_patterns(patterns: dict[str, Any]) -> str:
    parts = [
        "# AvaloniaUI XAML Patterns\n\n",
        "This reference contains common XAML patterns and templates for AvaloniaUI development.\n\n",
    ]
    for pattern in patterns.values():
        if isinstance(pattern, dict):
            parts.append(format_pattern(pattern))
            parts.append("\n---\n\n")
    return "".join(parts)


def find_pattern(patterns: dict[str, Any], pattern_name: str) -> str | None:
    target = normalize_name(pattern_name)
    for key, pattern in patterns.items():
        if not isinstance(pattern, dict):
            continue
        display_name = str(pattern.get("name") or "")
        if key.lower() == target or display_name.lower() == target:
            return format_pattern(pattern)
    return None


def format_mvvm_patterns(patterns: dict[str, Any]) -> str:
    parts = ["# MVVM Patterns for AvaloniaUI\n\n"]
    for key in MVVM_PATTERNS:
        pattern = patterns.get(key)
        if isinstance(pattern, dict):
            parts.append(format_pattern(pattern))
            parts.append("\n---\n\n")
    return "".join(parts)


class XamlPatternsResource(KnowledgeResource):
    """XAML 模式 (xaml-patterns.json)"""
    file_name = "xaml-patterns.json"
    root_key = "avalonia_xaml_patterns"

    async def patterns(self) -> str:
        return await self.cached("formatted_xaml_patterns", format_xaml_patterns)

    async def pattern(self, pattern_name: str) -> str:
        key = f"xaml_pattern:{normalize_name(pattern_name)}"
        return await self.cached_item(
            key,
            lambda patterns: find_pattern(patterns, pattern_name),
            f"XAML pattern '{pattern_name}' not found",
        )

    async def mvvm_patterns(self) -> str:
        return await self.cached("mvvm_patterns", format_mvvm_patterns)
