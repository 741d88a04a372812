"""
描述: AvaloniaUI MCP Server 全局配置加载器
主要功能:
    - 统一管理服务、缓存、工具与日志配置
    - 支持 YAML 文件加载与环境变量覆盖
    - 解析知识库数据目录 (Data/)
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_DATA_DIR = PACKAGE_DIR / "Data"


# region 基础配置模型
class ServerSettings(BaseModel):
    """服务监听配置"""
    host: str = "0.0.0.0"
    port: int = 8090
    debug: bool = False


class CacheSettings(BaseModel):
    """资源缓存配置"""
    default_ttl_seconds: float = 1800.0
    max_entries: int = 50
    preload_enabled: bool = True
    preload_ttl_seconds: float = 3600.0
    preload_files: list[str] = Field(
        default_factory=lambda: [
            "controls.json",
            "xaml-patterns.json",
            "migration-guide.json",
        ]
    )
    data_dir: str = ""
    single_flight: bool = False


class ToolsSettings(BaseModel):
    enabled: list[str] = Field(default_factory=list)


class LoggingSettings(BaseModel):
    """日志系统配置"""
    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """MCP Server 配置聚合根"""
    server: ServerSettings = Field(default_factory=ServerSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    tools: ToolsSettings = Field(default_factory=ToolsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
# endregion


# region 配置加载逻辑
def _expand_env(value: Any) -> Any:
    if isinstance(value, str):
        def replace(match: re.Match[str]) -> str:
            expr = match.group(1)
            if ":-" in expr:
                key, default = expr.split(":-", 1)
                return os.getenv(key, default)
            return os.getenv(expr, "")

        return _ENV_PATTERN.sub(replace, value)
    if isinstance(value, list):
        return [_expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: _expand_env(val) for key, val in value.items()}
    return value


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return _expand_env(data)


def _set_nested(data: dict[str, Any], keys: list[str], value: Any) -> None:
    current = data
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    current[keys[-1]] = value


def _parse_env_override(env_key: str, env_value: str) -> Any:
    if env_key == "AVALONIA_MCP_PRELOAD_FILES":
        return [item.strip() for item in env_value.split(",") if item.strip()]
    return env_value


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    mapping = {
        "MCP_PORT": ["server", "port"],
        "AVALONIA_MCP_LOG_LEVEL": ["logging", "level"],
        "AVALONIA_MCP_LOG_FORMAT": ["logging", "format"],
        "AVALONIA_MCP_DATA_DIR": ["cache", "data_dir"],
        "AVALONIA_MCP_CACHE_MAX_ENTRIES": ["cache", "max_entries"],
        "AVALONIA_MCP_CACHE_TTL_SECONDS": ["cache", "default_ttl_seconds"],
        "AVALONIA_MCP_PRELOAD_ENABLED": ["cache", "preload_enabled"],
        "AVALONIA_MCP_PRELOAD_FILES": ["cache", "preload_files"],
        "AVALONIA_MCP_SINGLE_FLIGHT": ["cache", "single_flight"],
    }
    for env_key, path in mapping.items():
        env_value = os.getenv(env_key)
        if env_value is not None and env_value != "":
            _set_nested(data, path, _parse_env_override(env_key, env_value))
    return data


def resolve_data_dir(settings: Settings) -> Path:
    """返回知识库数据目录；未配置时使用包内自带的 Data/"""
    configured = settings.cache.data_dir.strip()
    if not configured:
        return DEFAULT_DATA_DIR
    return Path(configured).expanduser().resolve()


def load_settings(config_path: str | None = None) -> Settings:
    path = Path(config_path or os.getenv("CONFIG_PATH", "config.yaml"))
    data = _load_yaml(path)
    data = _apply_env_overrides(data)
    return Settings.model_validate(data)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """获取单例配置对象"""
    return load_settings()
# endregion
