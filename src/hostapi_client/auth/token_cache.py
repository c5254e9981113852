"""
Token caches.

A token cache keeps the most recently issued token per cache key so that a
token can be reused until it expires, within one process (MemoryTokenCache)
or across processes (FileTokenCache).
"""

import json
import os
import tempfile
import threading
import time
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from hostapi_client.auth.token import Token
from hostapi_client.errors import CacheCorruptionWarning, TokenError
from hostapi_client.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached token and the time it was fetched."""

    token: Token
    fetched_at: float


class TokenCache(ABC):
    """Storage for issued tokens, keyed by account and scope."""

    @abstractmethod
    def get(self, key: str) -> Optional[Token]:
        """Return the cached token for ``key`` or None."""

    @abstractmethod
    def set(self, key: str, token: Token) -> None:
        """Store ``token`` under ``key``, replacing any previous token."""


class MemoryTokenCache(TokenCache):
    """Process-local cache, safe for concurrent threads."""

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Token]:
        with self._lock:
            entry = self._entries.get(key)
        return entry.token if entry else None

    def set(self, key: str, token: Token) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(token=token, fetched_at=time.time())


class FileTokenCache(TokenCache):
    """Cache persisted as a JSON document at ``path``.

    File layout::

        {"items": [{"key": "...", "token": "<jwt>", "fetched_at": 1700000000.0}]}

    Writes go to a temporary file in the same directory that is renamed over
    the cache file, so readers in other processes see either the old or the new
    document. A missing file is a miss; an unreadable file or entry is a miss
    that emits a CacheCorruptionWarning and is overwritten by the next ``set``.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()
        self._write_lock = threading.Lock()

    def get(self, key: str) -> Optional[Token]:
        items = self._read_items(warn=True)
        item = items.get(key)
        if item is None:
            return None

        try:
            return Token.parse(item["token"])
        except (KeyError, TypeError, TokenError) as e:
            self._corrupt(f"cache entry {key!r} is unreadable: {e}")
            return None

    def set(self, key: str, token: Token) -> None:
        with self._write_lock:
            items = self._read_items(warn=False)
            items[key] = {"key": key, "token": token.raw, "fetched_at": time.time()}
            self._write_atomic({"items": list(items.values())})
        logger.debug("Token cached to file", path=str(self.path), cache_key=key)

    def _read_items(self, warn: bool) -> Dict[str, dict]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            if warn:
                self._corrupt(f"cache file could not be read: {e}")
            return {}

        try:
            data = json.loads(content)
            items = data["items"]
            return {item["key"]: item for item in items if isinstance(item, dict)}
        except (ValueError, KeyError, TypeError) as e:
            if warn:
                self._corrupt(f"cache file is not a valid cache document: {e!r}")
            return {}

    def _write_atomic(self, document: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def _corrupt(self, message: str) -> None:
        logger.warning("Ignoring corrupt token cache", path=str(self.path), reason=message)
        warnings.warn(f"{self.path}: {message}", CacheCorruptionWarning, stacklevel=3)
