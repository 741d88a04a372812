"""
描述: 知识库资源基类
主要功能:
    - 通过 ResourceCache 读取 Data/ 下的 JSON 文档
    - 格式化后的 markdown 以独立 key 再缓存一层
    - 条目查找失败时返回提示文本，不写入缓存
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from avalonia_mcp.services.resource_cache import (
    PRELOAD_TTL,
    TTL,
    ResourceCache,
    ResourceParseError,
)


class ItemNotFound(LookupError):
    """文档内找不到指定条目"""


def normalize_name(name: str) -> str:
    return str(name or "").strip().lower()


def format_title(name: str) -> str:
    """snake_case 分类名转为标题，如 layout_controls -> Layout Controls"""
    words = [word for word in name.replace("_", " ").split(" ") if word]
    return " ".join(word[0].upper() + word[1:] for word in words)


def bullet_list(items: list[Any], code: bool = False) -> list[str]:
    lines = []
    for item in items:
        text = str(item)
        lines.append(f"- `{text}`" if code else f"- {text}")
    return lines


# region 资源基类
class KnowledgeResource:
    """
    知识库 JSON 资源

    子类声明 file_name 与 root_key，并用 cached()/cached_item() 生成内容。
    """
    file_name: str = ""
    root_key: str = ""
    document_ttl = PRELOAD_TTL
    formatted_ttl: TTL | None = None

    def __init__(self, cache: ResourceCache, data_dir: Path) -> None:
        if not self.file_name:
            raise ValueError(f"{self.__class__.__name__} must define 'file_name' attribute")
        self.cache = cache
        self.data_dir = data_dir

    @property
    def data_path(self) -> Path:
        return self.data_dir / self.file_name

    async def load_document(self) -> dict[str, Any]:
        document = await self.cache.aget_or_load_structured(self.data_path, self.document_ttl)
        if not isinstance(document, dict):
            raise ResourceParseError(self.data_path, "top-level JSON value must be an object")
        return document

    async def load_root(self) -> dict[str, Any]:
        document = await self.load_document()
        root = document.get(self.root_key) if self.root_key else document
        return root if isinstance(root, dict) else {}

    async def cached(self, key: str, build: Callable[[dict[str, Any]], str]) -> str:
        async def loader() -> str:
            return build(await self.load_root())

        return await self.cache.aget_or_load(key, loader, self.formatted_ttl)

    async def cached_item(
        self,
        key: str,
        build: Callable[[dict[str, Any]], str | None],
        missing_message: str,
    ) -> str:
        """按名称查找单个条目；找不到返回 missing_message 且不缓存"""
        async def loader() -> str:
            content = build(await self.load_root())
            if content is None:
                raise ItemNotFound(key)
            return content

        try:
            return await self.cache.aget_or_load(key, loader, self.formatted_ttl)
        except ItemNotFound:
            return missing_message
# endregion
