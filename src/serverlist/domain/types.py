# src/serverlist/domain/types.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence


@dataclass(frozen=True, slots=True)
class MemberEntry:
    """One fleet host as it appears in the shared list.

    ``address`` is ``""`` when the host could not resolve it and ``None`` when
    the stored record carries no address field at all.
    """

    name: str
    address: str | None
    last_seen: datetime


MembershipList = Sequence[MemberEntry]


@dataclass(frozen=True, slots=True)
class StoreRecord:
    payload: bytes
    revision: int


@dataclass(frozen=True, slots=True)
class AddressLookup:
    address: str | None = None
    reason: str | None = None

    @property
    def available(self) -> bool:
        return self.address is not None

    @classmethod
    def resolved(cls, address: str) -> "AddressLookup":
        return cls(address=address)

    @classmethod
    def unavailable(cls, reason: str) -> "AddressLookup":
        return cls(address=None, reason=reason)
