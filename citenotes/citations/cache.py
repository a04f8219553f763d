"""
Render Cache
============
Key/value stores for rendered reference lists.

Two backends satisfy the ``RenderCache`` contract:
- ``MemoryRenderCache``: process-local dict, handy for tests and previews
- ``FileRenderCache``: one JSON file per key, writes guarded by a file lock

Cache Structure (file backend):
    {cache_dir}/
        ├── 3f2a...e1.json        # sha256(key)[:32]
        ├── 3f2a...e1.json.lock
        └── ...

Each cache file contains:
    - schema_version: Entry format version
    - key: The original cache key
    - blob: Serialized half-parsed fragment
    - stored_at / expires_at: Unix timestamps

Reads never raise: a missing, expired, unreadable or malformed entry is a
miss. Writes are fire-and-forget.
"""

import hashlib
import json
import time
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from filelock import FileLock, Timeout
from loguru import logger

from citenotes.config import get_timeout
from citenotes.utils.schema_validation import is_valid_render_cache_entry

CACHE_SCHEMA_VERSION = "1.0"


def make_cache_key(prefix: str, parser_input: str, page_id: str) -> str:
    """Cache key for a reference list: content hash plus page identifier."""
    digest = hashlib.md5(parser_input.encode("utf-8")).hexdigest()
    return f"{prefix}:citeref:{digest}:{page_id}"


class MemoryRenderCache:
    """In-process cache with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}

    def get(self, key: str) -> Optional[str]:
        item = self._entries.get(key)
        if item is None:
            return None
        expires_at, blob = item
        if self._clock() >= expires_at:
            del self._entries[key]
            logger.debug(f"Render cache entry expired: {key}")
            return None
        return blob

    def set(self, key: str, blob: str, ttl_seconds: int) -> None:
        now = self._clock()
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.debug(f"Pruned {len(expired)} expired render cache entries")
        self._entries[key] = (now + ttl_seconds, blob)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class FileRenderCache:
    """
    Filesystem cache for rendered reference lists.

    Usage:
        cache = FileRenderCache(".citenotes_cache")
        processor = CiteProcessor(options, cache=cache)
    """

    def __init__(
        self,
        cache_dir: str,
        *,
        clock: Callable[[], float] = time.time,
        lock_timeout: Optional[int] = None,
    ):
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._clock = clock
        self.lock_timeout = get_timeout("file_lock") if lock_timeout is None else lock_timeout

        logger.debug(f"Render cache initialized at {self.cache_dir}")

    def _get_cache_path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:32]
        return self.cache_dir / f"{digest}.json"

    def get(self, key: str) -> Optional[str]:
        cache_path = self._get_cache_path(key)
        if not cache_path.exists():
            return None

        try:
            with open(cache_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Invalid render cache file {cache_path.name}: {e}")
            return None

        if not is_valid_render_cache_entry(data):
            logger.warning(f"Render cache entry failed validation: {cache_path.name}")
            return None
        if data["key"] != key:
            logger.debug(f"Render cache digest collision for {key}")
            return None
        if self._clock() >= data["expires_at"]:
            logger.debug(f"Render cache entry expired: {key}")
            return None

        return data["blob"]

    def set(self, key: str, blob: str, ttl_seconds: int) -> None:
        cache_path = self._get_cache_path(key)
        lock_path = cache_path.with_suffix(".json.lock")
        now = self._clock()
        entry = {
            "schema_version": CACHE_SCHEMA_VERSION,
            "key": key,
            "blob": blob,
            "stored_at": now,
            "expires_at": now + ttl_seconds,
        }

        try:
            with FileLock(lock_path, timeout=self.lock_timeout):
                with open(cache_path, "w", encoding="utf-8") as f:
                    json.dump(entry, f, ensure_ascii=False)
            logger.info(f"Cached reference list {key}")
        except (OSError, TypeError, Timeout) as e:
            logger.error(f"Failed to save render cache entry {key}: {e}")

    def clear(self) -> None:
        for path in self.cache_dir.glob("*.json"):
            path.unlink()
        logger.info("Cleared render cache")
