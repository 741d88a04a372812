from __future__ import annotations

import asyncio
from typing import Any

import pytest

import avalonia_mcp.tools  # noqa: F401
from avalonia_mcp.config import DEFAULT_DATA_DIR, Settings
from avalonia_mcp.services.resource_cache import ResourceCache
from avalonia_mcp.tools.base import BaseTool, ToolContext
from avalonia_mcp.tools.diagnostic import HealthCheckTool
from avalonia_mcp.tools.registry import ToolRegistry


def test_listing_respects_enabled_filter() -> None:
    everything = {tool["name"] for tool in ToolRegistry.list_tools()}
    assert {
        "avalonia.v1.controls.reference",
        "avalonia.v1.xaml_patterns.mvvm",
        "avalonia.v1.migration.steps",
        "avalonia.v1.diagnostic.clear_cache",
    } <= everything

    only = ToolRegistry.list_tools(["avalonia.v1.migration.guide"])
    assert [tool["name"] for tool in only] == ["avalonia.v1.migration.guide"]
    assert ToolRegistry.is_enabled("anything", [])


def test_tool_schema_parameters_are_copies() -> None:
    schema = HealthCheckTool.to_schema()
    schema["parameters"]["properties"]["injected"] = {"type": "string"}
    assert "injected" not in HealthCheckTool.parameters["properties"]
    assert "injected" not in BaseTool.parameters["properties"]


def test_register_requires_name() -> None:
    class Nameless(BaseTool):
        async def run(self, params: dict[str, Any]) -> dict[str, Any]:
            return {}

    with pytest.raises(ValueError):
        ToolRegistry.register(Nameless)


def test_health_check_reports_cache_failure() -> None:
    class BrokenCache(ResourceCache):
        def cache_processed(self, key: str, content: str, ttl: Any = None) -> None:
            raise RuntimeError("cache unavailable")

    async def run() -> dict[str, Any]:
        context = ToolContext(settings=Settings(), cache=BrokenCache(), data_dir=DEFAULT_DATA_DIR)
        return await HealthCheckTool(context).run({})

    result = asyncio.run(run())
    components = {item["component"]: item for item in result["components"]}
    assert result["healthy"] is False
    assert components["resource_cache"]["detail"] == "error: cache unavailable"
    assert components["data_directory"]["healthy"] is True
