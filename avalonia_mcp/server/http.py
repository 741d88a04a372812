"""
HTTP API for MCP tools.

The resource cache lives on ``app.state`` and is handed to every tool call
through ``ToolContext``.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, Response

from avalonia_mcp.server.schema import (
    ERROR_INTERNAL,
    ERROR_INVALID,
    ERROR_NOT_FOUND,
    ToolListResponse,
    ToolRequest,
    ToolResponse,
)
from avalonia_mcp.services.resource_cache import ResourceNotFoundError, ResourceParseError
from avalonia_mcp.tools.base import ToolContext
from avalonia_mcp.tools.registry import ToolRegistry


router = APIRouter()
logger = logging.getLogger(__name__)


def _tool_context(request: Request) -> ToolContext:
    state = request.app.state
    return ToolContext(settings=state.settings, cache=state.cache, data_dir=state.data_dir)


@router.get("/")
async def root() -> dict[str, str]:
    return {"status": "ok", "service": "avalonia-mcp-server"}


@router.get("/favicon.ico")
async def favicon() -> Response:
    return Response(status_code=204)


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/mcp/tools", response_model=ToolListResponse)
async def list_tools(request: Request) -> ToolListResponse:
    enabled = request.app.state.settings.tools.enabled
    return ToolListResponse.model_validate({"tools": ToolRegistry.list_tools(enabled)})


@router.post("/mcp/tools/{tool_name}", response_model=ToolResponse)
async def call_tool(tool_name: str, body: ToolRequest, request: Request) -> ToolResponse:
    tool_cls = ToolRegistry.get(tool_name)
    if not tool_cls:
        raise HTTPException(status_code=404, detail="Tool not found")

    context = _tool_context(request)
    if not ToolRegistry.is_enabled(tool_name, context.settings.tools.enabled):
        raise HTTPException(status_code=403, detail="Tool disabled")
    tool = tool_cls(context)

    try:
        return ToolResponse.ok(await tool.run(body.params))
    except ResourceNotFoundError as exc:
        return ToolResponse.fail(ERROR_NOT_FOUND, str(exc), {"path": exc.path})
    except (ResourceParseError, ValueError) as exc:
        return ToolResponse.fail(ERROR_INVALID, str(exc))
    except Exception as exc:
        logger.exception("Tool %s failed", tool_name, extra={"event_code": "tool.call.failed"})
        return ToolResponse.fail(ERROR_INTERNAL, str(exc))
