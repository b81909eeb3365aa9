"""Paste storage: in-memory and redis-backed implementations."""

import json
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, Optional

from dropcommon.constants import REDIS_KEY_PREFIX
from dropcommon.types import Paste
from dropserver.repositories.redis_client import translate_redis_errors

logger = logging.getLogger(__name__)


class PasteRepository(ABC):
    """
    Key-value store of pastes keyed by code.

    Implementations do not check expiry on reads; the service layer does.
    """

    @abstractmethod
    def exists(self, code: str) -> bool:
        ...

    @abstractmethod
    def get(self, code: str) -> Optional[Paste]:
        ...

    @abstractmethod
    def insert_if_absent(self, paste: Paste) -> bool:
        """Store the paste unless its code is taken. Returns True if stored."""

    @abstractmethod
    def increment_download_count(self, code: str) -> Optional[int]:
        """Returns the new count, or None if the paste is absent."""

    @abstractmethod
    def update_content(self, code: str, content: str) -> bool:
        """Overwrite content in place. Returns False if the paste is absent."""

    @abstractmethod
    def delete(self, code: str) -> bool:
        ...

    @abstractmethod
    def purge_expired(self, now: int) -> int:
        """Delete pastes whose expiry has passed. Returns the number removed."""


class MemoryPasteRepository(PasteRepository):
    """
    Process-local paste store. Every access holds one lock, so each call is atomic.
    """

    def __init__(self):
        self._pastes: Dict[str, Paste] = {}
        self._lock = threading.RLock()

    def exists(self, code: str) -> bool:
        with self._lock:
            return code in self._pastes

    def get(self, code: str) -> Optional[Paste]:
        with self._lock:
            paste = self._pastes.get(code)
            if paste is None:
                return None
            return replace(paste, files=list(paste.files))

    def insert_if_absent(self, paste: Paste) -> bool:
        with self._lock:
            if paste.code in self._pastes:
                return False
            self._pastes[paste.code] = replace(paste, files=list(paste.files))
            return True

    def increment_download_count(self, code: str) -> Optional[int]:
        with self._lock:
            paste = self._pastes.get(code)
            if paste is None:
                return None
            paste.download_count += 1
            return paste.download_count

    def update_content(self, code: str, content: str) -> bool:
        with self._lock:
            paste = self._pastes.get(code)
            if paste is None:
                return False
            paste.content = content
            return True

    def delete(self, code: str) -> bool:
        with self._lock:
            return self._pastes.pop(code, None) is not None

    def purge_expired(self, now: int) -> int:
        with self._lock:
            expired = [code for code, paste in self._pastes.items() if now > paste.expires_at]
            for code in expired:
                del self._pastes[code]
        return len(expired)

    def count(self) -> int:
        with self._lock:
            return len(self._pastes)


class RedisPasteRepository(PasteRepository):
    """
    Paste store on redis. Expiry is delegated to native key TTLs.

    Layout:
        <prefix>:paste:<code>            record JSON, PXAT expires_at
        <prefix>:paste:<code>:downloads  download counter, same TTL
    """

    def __init__(self, client, prefix: str = REDIS_KEY_PREFIX):
        self.client = client
        self.prefix = prefix

    def _key(self, code: str) -> str:
        return f"{self.prefix}:paste:{code}"

    def _downloads_key(self, code: str) -> str:
        return f"{self.prefix}:paste:{code}:downloads"

    def exists(self, code: str) -> bool:
        with translate_redis_errors("exists"):
            return self.client.exists(self._key(code)) > 0

    def get(self, code: str) -> Optional[Paste]:
        with translate_redis_errors("get"):
            record, downloads = self.client.mget(self._key(code), self._downloads_key(code))
        if record is None:
            return None
        paste = Paste.from_dict(json.loads(record))
        paste.download_count = int(downloads or 0)
        return paste

    def insert_if_absent(self, paste: Paste) -> bool:
        data = paste.to_dict()
        data.pop("download_count", None)
        with translate_redis_errors("set"):
            stored = self.client.set(
                self._key(paste.code),
                json.dumps(data),
                nx=True,
                pxat=paste.expires_at,
            )
        return bool(stored)

    def increment_download_count(self, code: str) -> Optional[int]:
        with translate_redis_errors("incr"):
            remaining = self.client.pttl(self._key(code))
            if remaining is None or remaining < 0:
                return None
            pipe = self.client.pipeline()
            pipe.incr(self._downloads_key(code))
            pipe.pexpire(self._downloads_key(code), remaining)
            count, _ = pipe.execute()
        return int(count)

    def update_content(self, code: str, content: str) -> bool:
        with translate_redis_errors("update"):
            record = self.client.get(self._key(code))
            if record is None:
                return False
            data = json.loads(record)
            data["content"] = content
            updated = self.client.set(self._key(code), json.dumps(data), xx=True, keepttl=True)
        return bool(updated)

    def delete(self, code: str) -> bool:
        with translate_redis_errors("delete"):
            return self.client.delete(self._key(code), self._downloads_key(code)) > 0

    def purge_expired(self, now: int) -> int:
        return 0
