"""
描述: MCP 工具注册入口。
主要功能:
    - 导入并注册知识库资源工具与诊断工具
    - 在服务启动时完成工具发现
"""

from avalonia_mcp.tools import diagnostic, knowledge  # noqa: F401
