"""Chunked upload session storage: in-memory and redis-backed implementations."""

import json
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, Optional, Set

from dropcommon.constants import REDIS_KEY_PREFIX
from dropcommon.types import UploadSession
from dropserver.repositories.redis_client import translate_redis_errors

logger = logging.getLogger(__name__)

COMPLETION_CLAIM_TTL_MS = 60 * 1000


class UploadRepository(ABC):
    """
    Store of in-progress upload sessions keyed by upload id.

    ``get`` returns session metadata with ``uploaded_chunks`` filled in but
    without chunk payloads; payloads are read with ``get_chunks``.
    """

    @abstractmethod
    def exists(self, upload_id: str) -> bool:
        ...

    @abstractmethod
    def create(self, session: UploadSession) -> bool:
        """Store a new session unless the id is taken. Returns True if stored."""

    @abstractmethod
    def get(self, upload_id: str) -> Optional[UploadSession]:
        ...

    @abstractmethod
    def put_chunk(self, upload_id: str, index: int, data: str) -> Optional[int]:
        """
        Store one chunk, overwriting any previous payload at that index.

        Returns:
            Distinct chunk count after the write, or None if the session is absent
        """

    @abstractmethod
    def get_chunks(self, upload_id: str) -> Dict[int, str]:
        ...

    @abstractmethod
    def delete(self, upload_id: str) -> bool:
        ...

    @abstractmethod
    def claim_completion(self, upload_id: str) -> bool:
        """Mark the session as being completed. Returns False if already claimed."""

    @abstractmethod
    def release_completion(self, upload_id: str) -> None:
        ...

    @abstractmethod
    def purge_expired(self, now: int) -> int:
        ...


class MemoryUploadRepository(UploadRepository):
    """
    Process-local session store guarded by a single lock.
    """

    def __init__(self):
        self._sessions: Dict[str, UploadSession] = {}
        self._completing: Set[str] = set()
        self._lock = threading.RLock()

    def exists(self, upload_id: str) -> bool:
        with self._lock:
            return upload_id in self._sessions

    def create(self, session: UploadSession) -> bool:
        with self._lock:
            if session.upload_id in self._sessions:
                return False
            self._sessions[session.upload_id] = replace(session, chunks={}, uploaded_chunks=0)
            return True

    def get(self, upload_id: str) -> Optional[UploadSession]:
        with self._lock:
            session = self._sessions.get(upload_id)
            if session is None:
                return None
            return replace(session, chunks={}, uploaded_chunks=len(session.chunks))

    def put_chunk(self, upload_id: str, index: int, data: str) -> Optional[int]:
        with self._lock:
            session = self._sessions.get(upload_id)
            if session is None:
                return None
            session.chunks[index] = data
            session.uploaded_chunks = len(session.chunks)
            return session.uploaded_chunks

    def get_chunks(self, upload_id: str) -> Dict[int, str]:
        with self._lock:
            session = self._sessions.get(upload_id)
            return dict(session.chunks) if session else {}

    def delete(self, upload_id: str) -> bool:
        with self._lock:
            self._completing.discard(upload_id)
            return self._sessions.pop(upload_id, None) is not None

    def claim_completion(self, upload_id: str) -> bool:
        with self._lock:
            if upload_id in self._completing:
                return False
            self._completing.add(upload_id)
            return True

    def release_completion(self, upload_id: str) -> None:
        with self._lock:
            self._completing.discard(upload_id)

    def purge_expired(self, now: int) -> int:
        with self._lock:
            expired = [
                upload_id for upload_id, session in self._sessions.items()
                if now > session.expires_at and upload_id not in self._completing
            ]
            for upload_id in expired:
                del self._sessions[upload_id]
        return len(expired)


class RedisUploadRepository(UploadRepository):
    """
    Session store on redis.

    Layout:
        <prefix>:upload:<id>             metadata JSON, PXAT expires_at
        <prefix>:upload:<id>:chunks      hash chunk index -> base64, same TTL
        <prefix>:upload:<id>:completing  completion claim
    """

    def __init__(self, client, prefix: str = REDIS_KEY_PREFIX):
        self.client = client
        self.prefix = prefix

    def _key(self, upload_id: str) -> str:
        return f"{self.prefix}:upload:{upload_id}"

    def _chunks_key(self, upload_id: str) -> str:
        return f"{self.prefix}:upload:{upload_id}:chunks"

    def _claim_key(self, upload_id: str) -> str:
        return f"{self.prefix}:upload:{upload_id}:completing"

    def exists(self, upload_id: str) -> bool:
        with translate_redis_errors("exists"):
            return self.client.exists(self._key(upload_id)) > 0

    def create(self, session: UploadSession) -> bool:
        with translate_redis_errors("set"):
            stored = self.client.set(
                self._key(session.upload_id),
                json.dumps(session.metadata()),
                nx=True,
                pxat=session.expires_at,
            )
        return bool(stored)

    def get(self, upload_id: str) -> Optional[UploadSession]:
        with translate_redis_errors("get"):
            pipe = self.client.pipeline()
            pipe.get(self._key(upload_id))
            pipe.hlen(self._chunks_key(upload_id))
            record, uploaded = pipe.execute()
        if record is None:
            return None
        return UploadSession.from_metadata(json.loads(record), uploaded_chunks=int(uploaded))

    def put_chunk(self, upload_id: str, index: int, data: str) -> Optional[int]:
        with translate_redis_errors("hset"):
            remaining = self.client.pttl(self._key(upload_id))
            if remaining is None or remaining < 0:
                return None
            pipe = self.client.pipeline()
            pipe.hset(self._chunks_key(upload_id), str(index), data)
            pipe.pexpire(self._chunks_key(upload_id), remaining)
            pipe.hlen(self._chunks_key(upload_id))
            _, _, uploaded = pipe.execute()
        return int(uploaded)

    def get_chunks(self, upload_id: str) -> Dict[int, str]:
        with translate_redis_errors("hgetall"):
            raw = self.client.hgetall(self._chunks_key(upload_id))
        return {int(index): data for index, data in raw.items()}

    def delete(self, upload_id: str) -> bool:
        with translate_redis_errors("delete"):
            removed = self.client.delete(
                self._key(upload_id),
                self._chunks_key(upload_id),
                self._claim_key(upload_id),
            )
        return removed > 0

    def claim_completion(self, upload_id: str) -> bool:
        with translate_redis_errors("claim"):
            claimed = self.client.set(self._claim_key(upload_id), "1", nx=True, px=COMPLETION_CLAIM_TTL_MS)
        return bool(claimed)

    def release_completion(self, upload_id: str) -> None:
        with translate_redis_errors("release"):
            self.client.delete(self._claim_key(upload_id))

    def purge_expired(self, now: int) -> int:
        return 0
