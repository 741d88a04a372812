"""Application factory for the AvaloniaUI MCP server."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI

from avalonia_mcp import __version__
from avalonia_mcp.config import CacheSettings, Settings, get_settings, resolve_data_dir
from avalonia_mcp.services.resource_cache import ResourceCache, preload_common_resources
from avalonia_mcp.utils.logger import setup_logging


def build_cache(settings: CacheSettings) -> ResourceCache:
    """按配置构造资源缓存实例 (每个应用一份)"""
    return ResourceCache(
        max_entries=settings.max_entries,
        default_ttl=settings.default_ttl_seconds,
        single_flight=settings.single_flight,
    )


def create_app(settings: Settings | None = None, cache: ResourceCache | None = None) -> FastAPI:
    """Create FastAPI application; the lifespan warms the resource cache before serving."""
    settings = settings or get_settings()
    setup_logging(settings.logging)
    logger = logging.getLogger(__name__)

    # Import tool registry before the router is mounted.
    import avalonia_mcp.tools  # noqa: F401
    from avalonia_mcp.server.http import router as http_router

    cache = cache if cache is not None else build_cache(settings.cache)
    data_dir = resolve_data_dir(settings)

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        if settings.cache.preload_enabled:
            started = time.perf_counter()
            loaded = await preload_common_resources(
                cache,
                data_dir,
                settings.cache.preload_files,
                settings.cache.preload_ttl_seconds,
            )
            logger.info(
                "Resource cache preloaded in %.0fms",
                (time.perf_counter() - started) * 1000,
                extra={"event_code": "server.preload", "loaded": loaded},
            )
        logger.info("AvaloniaUI MCP Server is ready", extra={"event_code": "server.ready"})
        try:
            yield
        finally:
            logger.info("AvaloniaUI MCP Server shutdown complete", extra={"event_code": "server.shutdown"})

    logger.info(
        "MCP server config loaded",
        extra={
            "data_dir": str(data_dir),
            "cache_max_entries": cache.max_entries,
            "tools_enabled_count": len(settings.tools.enabled),
        },
    )

    app = FastAPI(title="AvaloniaUI MCP Server", version=__version__, lifespan=_lifespan)
    app.state.settings = settings
    app.state.cache = cache
    app.state.data_dir = data_dir
    app.include_router(http_router)
    return app
