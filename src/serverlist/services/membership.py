# src/serverlist/services/membership.py
from __future__ import annotations
from datetime import datetime, timedelta
from typing import List, Optional

from serverlist.domain import AddressLookup, MemberEntry, MembershipList


def upsert_self(entries: MembershipList, name: str, lookup: AddressLookup, now: datetime) -> List[MemberEntry]:
    """Refresh our own entry, appending it when missing.

    A failed lookup keeps the previously stored address. Extra copies of our
    own name are dropped; entries of other hosts are left untouched.
    """
    out: List[MemberEntry] = []
    found = False
    for e in entries:
        if e.name != name:
            out.append(e)
            continue
        if found:
            continue
        found = True
        address = lookup.address if lookup.available else e.address
        out.append(MemberEntry(name=name, address=address, last_seen=now))
    if not found:
        out.append(MemberEntry(name=name, address=lookup.address or "", last_seen=now))
    return out


def prune_stale(entries: MembershipList, retention: timedelta, now: datetime) -> List[MemberEntry]:
    cutoff = now - retention
    return [e for e in entries if e.last_seen >= cutoff]


def find_entry(entries: MembershipList, name: str) -> Optional[MemberEntry]:
    for e in entries:
        if e.name == name:
            return e
    return None


def is_fresh(entry: MemberEntry, window: timedelta, now: datetime) -> bool:
    return now - entry.last_seen <= window
