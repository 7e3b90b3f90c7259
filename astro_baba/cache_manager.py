from __future__ import annotations

import json
import logging
import os
import threading
import time
from collections import OrderedDict
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger("astro_baba")


class CacheManager:
    """Bounded in-memory TTL/LRU cache for LLM-polished text.

    Keys look like ``llm_polished::<sha256>::<lang>``. Once ``max_items`` is
    reached the least recently read entry is dropped.
    """

    def __init__(self, max_items: int | None = None, default_ttl: int | None = None):
        try:
            configured_max = int(os.getenv("CACHE_MAX_ITEMS", "512"))
        except (TypeError, ValueError):
            configured_max = 512
        self._max_items = max(1, max_items if max_items is not None else configured_max)
        self._default_ttl = default_ttl
        self._entries: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def _now(self) -> float:
        return time.time()

    def _expiry_for(self, ttl: Any) -> float | None:
        if ttl is None:
            ttl = self._default_ttl
        if ttl is None:
            return None
        try:
            seconds = int(ttl)
        except (TypeError, ValueError):
            return None
        return self._now() + seconds if seconds > 0 else None

    def _drop_expired_unlocked(self) -> None:
        now = self._now()
        for key in [k for k, (_v, exp) in self._entries.items() if exp is not None and exp <= now]:
            del self._entries[key]

    def get(self, key: str):
        with self._lock:
            self._drop_expired_unlocked()
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return entry[0]

    def set(self, key: str, value, ttl: int | None = None):
        expires_at = self._expiry_for(ttl)
        with self._lock:
            self._drop_expired_unlocked()
            self._entries[key] = (value, expires_at)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_items:
                self._entries.popitem(last=False)

    def clear(self):
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> dict[str, int]:
        with self._lock:
            self._drop_expired_unlocked()
            return {"items": len(self._entries), "max_items": self._max_items, "hits": self.hits, "misses": self.misses}

    def __len__(self) -> int:
        with self._lock:
            self._drop_expired_unlocked()
            return len(self._entries)


POLISH_CACHE_TTL = 6 * 3600

cache = CacheManager(default_ttl=POLISH_CACHE_TTL)


# ------------------------------------------------------------------------------
# Daily calendar cache
# ------------------------------------------------------------------------------
class CacheEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    sign: str
    lang: str
    text: str
    generated_at: str = Field(alias="generatedAt")
    rich: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class DailyCache:
    """Two-tier ``(date, sign, lang)`` store: process memory, then JSON files.

    Layout on disk is ``<root>/<date>/<sign>.<lang>.json``. Entries never
    expire; a new IST date simply produces new keys. Unreadable or corrupt
    files count as a miss and get rewritten on the next ``put``.
    """

    def __init__(self, root: Path | str):
        self.root = Path(root)
        self._memory: dict[tuple[str, str, str], CacheEntry] = {}
        self._lock = threading.Lock()

    def _path(self, date: str, sign: str, lang: str) -> Path:
        return self.root / date / f"{sign}.{lang}.json"

    def get(self, date: str, sign: str, lang: str) -> Optional[CacheEntry]:
        key = (date, sign, lang)
        with self._lock:
            hit = self._memory.get(key)
        if hit is not None:
            return hit

        path = self._path(date, sign, lang)
        if not path.is_file():
            return None
        try:
            entry = CacheEntry.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Daily cache file unreadable, treating as miss path=%s error=%s", path, e)
            return None

        with self._lock:
            self._memory[key] = entry
        return entry

    def put(self, date: str, sign: str, lang: str, entry: CacheEntry) -> None:
        with self._lock:
            self._memory[(date, sign, lang)] = entry

        path = self._path(date, sign, lang)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            tmp_path.write_text(json.dumps(entry.to_json(), ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            logger.warning("Daily cache write failed; keeping memory copy only path=%s error=%s", path, e)

    def memory_size(self) -> int:
        with self._lock:
            return len(self._memory)
