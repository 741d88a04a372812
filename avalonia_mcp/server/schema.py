"""
描述: MCP Server HTTP API 数据模型
主要功能:
    - 工具调用请求/响应模型
    - 工具元数据列表模型
    - 错误码约定 (资源缺失、解析或参数错误、内部错误)
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


ERROR_NOT_FOUND = "MCP_404"
ERROR_INVALID = "MCP_422"
ERROR_INTERNAL = "MCP_500"


# region API 数据模型
class ToolRequest(BaseModel):
    """工具调用请求体"""
    params: dict[str, Any] = Field(default_factory=dict)


class ToolInfo(BaseModel):
    name: str
    description: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)


class ToolListResponse(BaseModel):
    tools: list[ToolInfo] = Field(default_factory=list)


class ToolError(BaseModel):
    """工具错误信息"""
    code: str
    message: str
    detail: Any | None = None


class ToolResponse(BaseModel):
    """工具调用响应"""
    success: bool
    data: dict[str, Any] | None = None
    error: ToolError | None = None

    @classmethod
    def ok(cls, data: dict[str, Any]) -> "ToolResponse":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, code: str, message: str, detail: Any | None = None) -> "ToolResponse":
        return cls(success=False, error=ToolError(code=code, message=message, detail=detail))
# endregion
