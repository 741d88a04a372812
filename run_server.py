"""
描述: AvaloniaUI MCP Server 启动脚本
主要功能:
    - 配置 asyncio 策略 (Windows)
    - 使用 uvicorn 启动 ASGI 服务
    - 端口取自 MCP_PORT (默认 8090)
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

# Windows 兼容性：在任何 asyncio 操作前设置策略
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

BASE_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(BASE_DIR))

os.environ.setdefault("CONFIG_PATH", str(BASE_DIR / "config.yaml"))

from dotenv import load_dotenv

load_dotenv(BASE_DIR / ".env")

import uvicorn


if __name__ == "__main__":
    port = int(os.getenv("MCP_PORT", "8090"))
    print(f"Starting AvaloniaUI MCP Server on http://0.0.0.0:{port}")
    print("Press Ctrl+C to stop")
    uvicorn.run("avalonia_mcp.main:app", host="0.0.0.0", port=port, log_level="info")
