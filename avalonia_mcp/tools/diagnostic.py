"""
描述: 服务诊断工具
主要功能:
    - 资源缓存统计
    - 手动清空缓存
    - 健康检查 (缓存读写、数据目录与预热文件)
"""

from __future__ import annotations

import logging
from typing import Any

from avalonia_mcp.tools.base import BaseTool
from avalonia_mcp.tools.registry import ToolRegistry


logger = logging.getLogger(__name__)

HEALTH_CHECK_KEY = "health_check_test"


@ToolRegistry.register
class CacheStatsTool(BaseTool):
    name = "avalonia.v1.diagnostic.cache_stats"
    description = "Get resource cache statistics (entries, freshness, hit ratio)."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        stats = self.context.cache.stats()
        return {"statistics": stats.to_dict(), "summary": str(stats)}


@ToolRegistry.register
class ClearCacheTool(BaseTool):
    name = "avalonia.v1.diagnostic.clear_cache"
    description = "Clear every entry of the resource cache."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        removed = self.context.cache.clear_all()
        return {"cleared": True, "removed_entries": removed}


@ToolRegistry.register
class HealthCheckTool(BaseTool):
    name = "avalonia.v1.diagnostic.health_check"
    description = "Perform a health check of the resource cache and knowledge-base data files."

    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        components = [self._check_cache(), self._check_data_dir()]
        return {
            "healthy": all(component["healthy"] for component in components),
            "components": components,
        }

    def _check_cache(self) -> dict[str, Any]:
        cache = self.context.cache
        try:
            cache.cache_processed(HEALTH_CHECK_KEY, "test_value")
            value = cache.get_or_load(HEALTH_CHECK_KEY, lambda: "fallback")
            healthy = value == "test_value"
            detail = "operational" if healthy else "cache returned an unexpected value"
        except Exception as exc:
            logger.exception("Resource cache health check failed")
            healthy = False
            detail = f"error: {exc}"
        finally:
            cache.remove_entry(HEALTH_CHECK_KEY)
        return {"component": "resource_cache", "healthy": healthy, "detail": detail}

    def _check_data_dir(self) -> dict[str, Any]:
        data_dir = self.context.data_dir
        if not data_dir.is_dir():
            return {
                "component": "data_directory",
                "healthy": False,
                "detail": f"missing: {data_dir}",
            }
        expected = self.context.settings.cache.preload_files
        missing = [name for name in expected if not (data_dir / name).is_file()]
        return {
            "component": "data_directory",
            "healthy": not missing,
            "detail": f"missing files: {', '.join(missing)}" if missing else "all data files present",
        }
