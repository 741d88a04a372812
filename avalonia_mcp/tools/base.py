"""
描述: MCP 工具基类定义
主要功能:
    - ToolContext：每次调用注入的配置、资源缓存与数据目录
    - BaseTool：工具抽象基类与 schema 描述
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from avalonia_mcp.config import Settings
from avalonia_mcp.services.resource_cache import ResourceCache


# region 工具上下文与基类
@dataclass
class ToolContext:
    """工具执行上下文 (依赖注入)"""
    settings: Settings
    cache: ResourceCache
    data_dir: Path


class BaseTool(ABC):
    """MCP 工具抽象基类"""
    name: str = ""
    description: str = ""
    parameters: dict[str, Any] = {"type": "object", "properties": {}}

    def __init__(self, context: ToolContext) -> None:
        self.context = context

    @abstractmethod
    async def run(self, params: dict[str, Any]) -> dict[str, Any]:
        """
        执行工具逻辑

        参数:
            params: 工具参数字典

        返回:
            执行结果字典，知识库工具统一返回 {"content": markdown}
        """
        raise NotImplementedError

    @classmethod
    def to_schema(cls) -> dict[str, Any]:
        # 返回副本，调用方修改不会影响类属性
        return {
            "name": cls.name,
            "description": cls.description,
            "parameters": deepcopy(cls.parameters),
        }
# endregion
