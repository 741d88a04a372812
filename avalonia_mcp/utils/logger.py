"""
描述: MCP Server 日志工具库
主要功能:
    - JSON 格式化输出 (含 extra 字段)
    - 开发环境文本格式
    - 统一日志配置初始化
"""

from __future__ import annotations

import json
import logging
from typing import Any

from avalonia_mcp.config import LoggingSettings


_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "taskName", "message", "asctime",
    }
)


# region 日志 Formatter
class JsonFormatter(logging.Formatter):
    """JSON 日志格式化器，extra 字段原样并入输出"""
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class SimpleFormatter(logging.Formatter):
    """简单文本格式化器（开发环境用）"""
    def format(self, record: logging.LogRecord) -> str:
        base = f"[{self.formatTime(record)}] {record.levelname:5} {record.name}: {record.getMessage()}"
        event_code = getattr(record, "event_code", None)
        if event_code:
            base += f" [{event_code}]"
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base
# endregion


# region 日志初始化
def setup_logging(settings: LoggingSettings) -> None:
    """
    初始化日志系统

    参数:
        settings: 日志配置对象
    """
    level = getattr(logging, settings.level.upper(), logging.INFO)
    handler = logging.StreamHandler()
    if settings.format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(SimpleFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)
# endregion
