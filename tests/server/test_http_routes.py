from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import httpx
from fastapi import FastAPI

from avalonia_mcp.config import CacheSettings, LoggingSettings, Settings, ToolsSettings
from avalonia_mcp.server.app_factory import create_app
from avalonia_mcp.services.resource_cache import ResourceCache


def _settings(**cache_overrides: Any) -> Settings:
    return Settings(
        cache=CacheSettings(**cache_overrides),
        logging=LoggingSettings(format="text"),
    )


async def _call(app: FastAPI, tool: str, params: dict[str, Any] | None = None) -> httpx.Response:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.post(f"/mcp/tools/{tool}", json={"params": params or {}})


def test_health_and_tool_listing() -> None:
    async def run() -> None:
        app = create_app(_settings())
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            health = await client.get("/health")
            assert health.status_code == 200
            tools = await client.get("/mcp/tools")
            assert tools.status_code == 200
            names = {tool["name"] for tool in tools.json()["tools"]}
            assert "avalonia.v1.controls.get" in names
            assert "avalonia.v1.diagnostic.cache_stats" in names

    asyncio.run(run())


def test_control_lookup_through_http() -> None:
    async def run() -> None:
        app = create_app(_settings())
        response = await _call(app, "avalonia.v1.controls.get", {"control_name": "button"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["content"].startswith("### Button")

    asyncio.run(run())


def test_missing_parameter_maps_to_validation_error() -> None:
    async def run() -> None:
        app = create_app(_settings())
        body = (await _call(app, "avalonia.v1.xaml_patterns.get")).json()
        assert body["success"] is False
        assert body["error"]["code"] == "MCP_422"

    asyncio.run(run())


def test_missing_data_file_maps_to_not_found(tmp_path: Path) -> None:
    async def run() -> None:
        app = create_app(_settings(data_dir=str(tmp_path)))
        body = (await _call(app, "avalonia.v1.controls.reference")).json()
        assert body["success"] is False
        assert body["error"]["code"] == "MCP_404"
        assert body["error"]["detail"]["path"].endswith("controls.json")

    asyncio.run(run())


def test_unknown_and_disabled_tools() -> None:
    async def run() -> None:
        settings = _settings()
        settings.tools = ToolsSettings(enabled=["avalonia.v1.controls.reference"])
        app = create_app(settings)
        assert (await _call(app, "avalonia.v1.nope")).status_code == 404
        assert (await _call(app, "avalonia.v1.migration.guide")).status_code == 403

    asyncio.run(run())


def test_diagnostic_tools_report_and_clear_cache() -> None:
    async def run() -> None:
        cache = ResourceCache()
        app = create_app(_settings(), cache=cache)
        assert app.state.cache is cache
        await _call(app, "avalonia.v1.migration.steps")

        stats = (await _call(app, "avalonia.v1.diagnostic.cache_stats")).json()["data"]["statistics"]
        assert stats["total_entries"] == 2
        assert "migration:steps" in stats["keys"]
        assert len(cache) == 2

        cleared = (await _call(app, "avalonia.v1.diagnostic.clear_cache")).json()["data"]
        assert cleared == {"cleared": True, "removed_entries": 2}
        assert len(cache) == 0

    asyncio.run(run())


def test_health_check_tool(tmp_path: Path) -> None:
    async def run() -> None:
        cache = ResourceCache()
        healthy = (await _call(create_app(_settings(), cache=cache), "avalonia.v1.diagnostic.health_check")).json()
        assert healthy["data"]["healthy"] is True
        assert "health_check_test" not in cache

        broken = (await _call(
            create_app(_settings(data_dir=str(tmp_path))),
            "avalonia.v1.diagnostic.health_check",
        )).json()
        assert broken["data"]["healthy"] is False
        components = {item["component"]: item for item in broken["data"]["components"]}
        assert components["resource_cache"]["healthy"] is True
        assert components["data_directory"]["healthy"] is False

    asyncio.run(run())


def test_lifespan_preloads_known_resources() -> None:
    async def run() -> None:
        cache = ResourceCache()
        app = create_app(_settings(), cache=cache)
        assert app.state.cache is cache
        async with app.router.lifespan_context(app):
            keys = cache.stats().keys
        assert len([key for key in keys if key.startswith("json:")]) == 3

    asyncio.run(run())


def test_lifespan_skips_preload_when_disabled() -> None:
    async def run() -> None:
        cache = ResourceCache()
        app = create_app(_settings(preload_enabled=False), cache=cache)
        assert app.state.cache is cache
        async with app.router.lifespan_context(app):
            assert len(cache) == 0

    asyncio.run(run())
