"""
描述: 知识库资源缓存 (TTL + LRU)
主要功能:
    - get-or-load 语义：命中直接返回，未命中调用 loader 后写入
    - 容量已满时先清理过期项，仍满则淘汰一个最久未访问项
    - JSON 资源文件的结构化加载与启动预热 (preload)
    - thread-safe：单把锁保护全部结构修改，loader 执行期间不持锁
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from threading import Lock
from typing import Any, Awaitable, Callable, Iterable, Union


logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=30)
PRELOAD_TTL = timedelta(hours=1)
DEFAULT_MAX_ENTRIES = 50
PRELOAD_FILES: tuple[str, ...] = (
    "controls.json",
    "xaml-patterns.json",
    "migration-guide.json",
)

TTL = Union[timedelta, float, int]
Loader = Callable[[], str]
AsyncLoader = Callable[[], Union[str, Awaitable[str]]]


# region 异常
class ResourceCacheError(Exception):
    """资源缓存相关异常基类"""


class ResourceNotFoundError(ResourceCacheError, FileNotFoundError):
    """资源文件不存在 (不缓存，不重试)"""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"Resource file not found: {path}")
        self.path = str(path)


class ResourceParseError(ResourceCacheError, ValueError):
    """资源内容无法解析为 JSON 文档"""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"Failed to parse resource {path}: {reason}")
        self.path = str(path)
        self.reason = reason
# endregion


# region 缓存条目与统计
def ttl_seconds(ttl: TTL) -> float:
    """TTL 统一换算为秒；不接受负值"""
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    if seconds < 0:
        raise ValueError(f"TTL must not be negative: {ttl!r}")
    return seconds


@dataclass
class CacheEntry:
    """
    单个缓存条目

    content 与 expiry_time 在创建后不再变化，只有 last_accessed 会被命中刷新。
    """
    content: str
    expiry_time: float
    last_accessed: float

    @classmethod
    def create(cls, content: str, ttl: float, now: float) -> "CacheEntry":
        return cls(content=content, expiry_time=now + ttl, last_accessed=now)

    def is_expired(self, now: float) -> bool:
        return now > self.expiry_time

    def touch(self, now: float) -> None:
        self.last_accessed = now


@dataclass
class CacheStatistics:
    """
    缓存状态快照

    freshness_ratio 是结构性比例 (未过期条目 / 全部条目)，
    hit_ratio 才是按调用累计的命中率。
    """
    total_entries: int = 0
    valid_entries: int = 0
    expired_entries: int = 0
    oldest_entry_age_seconds: float = 0.0
    newest_entry_age_seconds: float = 0.0
    keys: list[str] = field(default_factory=list)
    hits: int = 0
    misses: int = 0

    @property
    def freshness_ratio(self) -> float:
        if self.total_entries <= 0:
            return 0.0
        return self.valid_entries / self.total_entries

    @property
    def hit_ratio(self) -> float:
        lookups = self.hits + self.misses
        if lookups <= 0:
            return 0.0
        return self.hits / lookups

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_entries": self.total_entries,
            "valid_entries": self.valid_entries,
            "expired_entries": self.expired_entries,
            "oldest_entry_age_seconds": round(self.oldest_entry_age_seconds, 3),
            "newest_entry_age_seconds": round(self.newest_entry_age_seconds, 3),
            "freshness_ratio": round(self.freshness_ratio, 4),
            "hits": self.hits,
            "misses": self.misses,
            "hit_ratio": round(self.hit_ratio, 4),
            "keys": list(self.keys),
        }

    def __str__(self) -> str:
        return (
            f"Cache Statistics: {self.valid_entries}/{self.total_entries} valid entries, "
            f"{self.freshness_ratio:.1%} fresh, {self.hit_ratio:.1%} hit ratio, "
            f"{self.expired_entries} expired"
        )
# endregion


# region 资源缓存
def structured_key(file_path: str | Path) -> str:
    return f"json:{file_path}"


def _read_text(path: Path) -> str:
    if not path.is_file():
        raise ResourceNotFoundError(path)
    return path.read_text(encoding="utf-8")


def _parse_document(path: Path, text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ResourceParseError(path, str(exc)) from exc


def _on_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


async def _call_loader(loader: AsyncLoader) -> str:
    result = loader()
    if inspect.isawaitable(result):
        result = await result
    return result


class ResourceCache:
    """
    知识库资源缓存

    功能:
        - 以字符串 key 缓存字符串内容，按 TTL 过期
        - 容量上限 max_entries；插入前先清理过期项，再按 LRU 淘汰一个
        - 同步与异步两套 get-or-load 接口共享同一存储
        - single_flight=True 时同一 key 的并发未命中只执行一次 loader
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        default_ttl: TTL = DEFAULT_TTL,
        *,
        single_flight: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if int(max_entries) < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = int(max_entries)
        self._default_ttl = ttl_seconds(default_ttl)
        self._single_flight = single_flight
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._inflight: dict[str, Future[str]] = {}
        self._lock = Lock()
        self._hits = 0
        self._misses = 0

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """仅检查存在且未过期，不刷新访问时间"""
        with self._lock:
            entry = self._entries.get(key)  # type: ignore[arg-type]
            return entry is not None and not entry.is_expired(self._clock())

    # ---- get-or-load ----
    def get_or_load(self, key: str, loader: Loader, ttl: TTL | None = None) -> str:
        """
        获取缓存内容，未命中时调用 loader 并写入

        参数:
            key: 缓存 key (调用方保证不冲突)
            loader: 无参函数，返回字符串；抛出的异常原样传播，不缓存
            ttl: 有效期，缺省为 default_ttl

        返回:
            缓存或新加载的内容
        """
        _require_key(key)
        ttl_value = self._resolve_ttl(ttl)
        cached = self._lookup(key)
        if cached is not None:
            return cached

        # 事件循环线程上阻塞等待会卡住持有者协程，直接加载
        if not self._single_flight or _on_event_loop():
            content = loader()
            self._insert(key, content, ttl_value)
            return content

        future, owner = self._claim(key)
        if not owner:
            return future.result()
        try:
            content = loader()
            self._insert(key, content, ttl_value)
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(content)
            return content
        finally:
            self._release(key)

    async def aget_or_load(self, key: str, loader: AsyncLoader, ttl: TTL | None = None) -> str:
        """get_or_load 的异步版本；loader 可返回字符串或 awaitable"""
        _require_key(key)
        ttl_value = self._resolve_ttl(ttl)
        cached = self._lookup(key)
        if cached is not None:
            return cached

        if not self._single_flight:
            content = await _call_loader(loader)
            self._insert(key, content, ttl_value)
            return content

        future, owner = self._claim(key)
        if not owner:
            return await asyncio.wrap_future(future)
        try:
            content = await _call_loader(loader)
            self._insert(key, content, ttl_value)
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(content)
            return content
        finally:
            self._release(key)

    def get_or_load_structured(self, file_path: str | Path, ttl: TTL | None = None) -> Any:
        """
        读取并缓存 JSON 文件，返回解析后的文档

        文件不存在抛 ResourceNotFoundError；内容不是合法 JSON 抛 ResourceParseError，
        并移除对应缓存条目，文件修复后下次调用重新读取。
        """
        path = Path(file_path)
        key = structured_key(path)
        text = self.get_or_load(key, lambda: _read_text(path), ttl)
        return self._parse_or_discard(key, path, text)

    async def aget_or_load_structured(self, file_path: str | Path, ttl: TTL | None = None) -> Any:
        path = Path(file_path)
        key = structured_key(path)

        async def load() -> str:
            return await asyncio.to_thread(_read_text, path)

        text = await self.aget_or_load(key, load, ttl)
        return self._parse_or_discard(key, path, text)

    # ---- 直接写入与删除 ----
    def cache_processed(self, key: str, content: str, ttl: TTL | None = None) -> None:
        """直接写入已计算好的内容 (绕过 loader)，同样受容量与淘汰策略约束"""
        _require_key(key)
        self._insert(key, content, self._resolve_ttl(ttl))

    def remove_entry(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear_all(self) -> int:
        """清空全部条目，返回被清除的数量；命中计数保留"""
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        logger.info("Resource cache cleared", extra={"event_code": "cache.clear", "removed": removed})
        return removed

    def cleanup_expired(self) -> int:
        """移除全部过期条目，返回移除数量"""
        with self._lock:
            return self._cleanup_expired_locked(self._clock())

    def reset_counters(self) -> None:
        with self._lock:
            self._hits = 0
            self._misses = 0

    # ---- 统计 ----
    def stats(self) -> CacheStatistics:
        with self._lock:
            now = self._clock()
            entries = list(self._entries.values())
            expired = sum(1 for entry in entries if entry.is_expired(now))
            oldest = min(entries, key=lambda entry: entry.last_accessed, default=None)
            newest = max(entries, key=lambda entry: entry.last_accessed, default=None)
            return CacheStatistics(
                total_entries=len(entries),
                valid_entries=len(entries) - expired,
                expired_entries=expired,
                oldest_entry_age_seconds=now - oldest.last_accessed if oldest else 0.0,
                newest_entry_age_seconds=now - newest.last_accessed if newest else 0.0,
                keys=list(self._entries.keys()),
                hits=self._hits,
                misses=self._misses,
            )

    # ---- 预热 ----
    async def preload(self, paths: Iterable[str | Path], ttl: TTL = PRELOAD_TTL) -> list[str]:
        """
        并发预热一组 JSON 资源文件

        单个文件失败 (不存在、解析失败或其他异常) 只记录 warning 并跳过，
        不影响其余文件。返回成功加载的路径列表。
        """
        targets = [Path(path) for path in paths]

        async def load_one(path: Path) -> str | None:
            try:
                await self.aget_or_load_structured(path, ttl)
            except Exception as exc:
                logger.warning(
                    "Failed to preload resource %s: %s",
                    path,
                    exc,
                    extra={"event_code": "cache.preload.failed"},
                )
                return None
            return str(path)

        results = await asyncio.gather(*(load_one(path) for path in targets))
        loaded = [path for path in results if path is not None]
        logger.info(
            "Resource cache preload finished: %s/%s loaded",
            len(loaded),
            len(targets),
            extra={"event_code": "cache.preload.done"},
        )
        return loaded

    # ---- 内部实现 ----
    def _resolve_ttl(self, ttl: TTL | None) -> float:
        return self._default_ttl if ttl is None else ttl_seconds(ttl)

    def _lookup(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            now = self._clock()
            if entry.is_expired(now):
                self._entries.pop(key, None)
                self._misses += 1
                logger.debug("Cache entry expired: %s", key)
                return None
            entry.touch(now)
            self._hits += 1
            return entry.content

    def _insert(self, key: str, content: str, ttl: float) -> None:
        if not isinstance(content, str):
            raise TypeError(f"Cache content for {key!r} must be str, got {type(content).__name__}")
        with self._lock:
            now = self._clock()
            if key not in self._entries and len(self._entries) >= self._max_entries:
                self._cleanup_expired_locked(now)
                if len(self._entries) >= self._max_entries:
                    self._evict_lru_locked()
            self._entries[key] = CacheEntry.create(content, ttl, now)

    def _cleanup_expired_locked(self, now: float) -> int:
        expired_keys = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired_keys:
            self._entries.pop(key, None)
        if expired_keys:
            logger.debug("Removed %s expired cache entries", len(expired_keys))
        return len(expired_keys)

    def _evict_lru_locked(self) -> None:
        if not self._entries:
            return
        lru_key = min(self._entries, key=lambda key: self._entries[key].last_accessed)
        self._entries.pop(lru_key, None)
        logger.debug("Evicted least recently used cache entry: %s", lru_key)

    def _claim(self, key: str) -> tuple[Future[str], bool]:
        with self._lock:
            future = self._inflight.get(key)
            if future is not None:
                return future, False
            future = Future()
            self._inflight[key] = future
            return future, True

    def _release(self, key: str) -> None:
        with self._lock:
            self._inflight.pop(key, None)

    def _parse_or_discard(self, key: str, path: Path, text: str) -> Any:
        try:
            return _parse_document(path, text)
        except ResourceParseError:
            self.remove_entry(key)
            raise


def _require_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise ValueError("Cache key must be a non-empty string")
# endregion


# region 预热入口
async def preload_common_resources(
    cache: ResourceCache,
    data_dir: Path,
    files: Iterable[str] = PRELOAD_FILES,
    ttl: TTL = PRELOAD_TTL,
) -> list[str]:
    """
    启动时预热常用知识库文件

    数据目录不存在时直接返回空列表。
    """
    if not data_dir.is_dir():
        logger.warning(
            "Data directory %s not found, skip preload",
            data_dir,
            extra={"event_code": "cache.preload.skipped"},
        )
        return []
    return await cache.preload([data_dir / name for name in files], ttl)
# endregion
