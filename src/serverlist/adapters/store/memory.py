from __future__ import annotations
from threading import RLock
from typing import Optional

from serverlist.domain import StoreRecord
from serverlist.ports.store import RemoteStorePort
from serverlist.services.errors import ConflictError, RecordNotFound


class InMemoryStore(RemoteStorePort):
    """Test double for the registry: one record, and a write must carry a higher revision."""

    def __init__(self, payload: Optional[bytes] = None, revision: int = 0) -> None:
        self._lock = RLock()
        self._payload = payload
        self._revision = revision
        self.reads = 0
        self.writes = 0

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def payload(self) -> Optional[bytes]:
        return self._payload

    def read(self) -> StoreRecord:
        with self._lock:
            self.reads += 1
            if self._payload is None:
                raise RecordNotFound("record not found")
            return StoreRecord(payload=self._payload, revision=self._revision)

    def write(self, payload: bytes, revision: int) -> None:
        with self._lock:
            if revision <= self._revision:
                raise ConflictError(revision)
            self._payload = payload
            self._revision = revision
            self.writes += 1
