from __future__ import annotations
from typing import Protocol

from serverlist.domain import StoreRecord


class RemoteStorePort(Protocol):
    """A single versioned record guarded by an optimistic revision check.

    ``read`` raises ``RecordNotFound`` for a record that was never written and
    ``TransientStoreError`` for anything else; ``write`` raises
    ``ConflictError`` when the revision is stale.
    """

    def read(self) -> StoreRecord: ...
    def write(self, payload: bytes, revision: int) -> None: ...
