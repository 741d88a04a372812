"""
描述: 服务层导出
主要功能:
    - 资源缓存 ResourceCache 及其异常、统计类型
"""

from avalonia_mcp.services.resource_cache import (
    CacheEntry,
    CacheStatistics,
    ResourceCache,
    ResourceCacheError,
    ResourceNotFoundError,
    ResourceParseError,
    preload_common_resources,
)

__all__ = [
    "CacheEntry",
    "CacheStatistics",
    "ResourceCache",
    "ResourceCacheError",
    "ResourceNotFoundError",
    "ResourceParseError",
    "preload_common_resources",
]
