"""
描述: MCP 工具注册中心
主要功能:
    - 通过装饰器登记工具类
    - 按配置的启用列表过滤工具
    - 输出工具元数据 (名称、描述、参数 schema)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Type

from avalonia_mcp.tools.base import BaseTool


logger = logging.getLogger(__name__)


# region 工具注册中心
class ToolRegistry:
    """工具注册中心 (类级注册表，按 name 索引)"""
    _tools: dict[str, Type[BaseTool]] = {}

    @classmethod
    def register(cls, tool_cls: Type[BaseTool]) -> Type[BaseTool]:
        tool_name = getattr(tool_cls, "name", "")
        if not tool_name:
            raise ValueError(f"{tool_cls.__name__} must define 'name' attribute")
        if tool_name in cls._tools and cls._tools[tool_name] is not tool_cls:
            logger.warning("Tool %s already registered, overwriting", tool_name)
        cls._tools[tool_name] = tool_cls
        return tool_cls

    @classmethod
    def get(cls, name: str) -> Type[BaseTool] | None:
        return cls._tools.get(name)

    @staticmethod
    def is_enabled(name: str, enabled: Iterable[str]) -> bool:
        """启用列表为空表示全部启用"""
        allowed = set(enabled)
        return not allowed or name in allowed

    @classmethod
    def list_tools(cls, enabled: Iterable[str] = ()) -> list[dict[str, Any]]:
        allowed = list(enabled)
        return [
            tool_cls.to_schema()
            for name, tool_cls in sorted(cls._tools.items())
            if cls.is_enabled(name, allowed)
        ]
# endregion
