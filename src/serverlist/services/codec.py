# src/serverlist/services/codec.py
from __future__ import annotations
import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

from serverlist.domain import MemberEntry
from serverlist.services.errors import CodecError

# RFC 3339 writers may emit any number of fractional digits and a bare "Z"
_FRACTION = re.compile(r"\.(\d+)")

NEVER_ANNOUNCED = datetime.min.replace(tzinfo=timezone.utc)


def _format_time(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat()


def _parse_time(raw: Any) -> datetime:
    if not isinstance(raw, str):
        raise CodecError(f"last_announce must be a string, got {type(raw).__name__}")
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), raw.strip(), count=1)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(text)
    except ValueError as e:
        raise CodecError(f"invalid last_announce {raw!r}") from e
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _entry_to_dict(entry: MemberEntry) -> Dict[str, Any]:
    d: Dict[str, Any] = {"name": entry.name}
    if entry.address is not None:
        d["ip"] = entry.address
    d["last_announce"] = _format_time(entry.last_seen)
    return d


def _entry_from_dict(item: Any) -> MemberEntry:
    if not isinstance(item, dict):
        raise CodecError(f"member record must be an object, got {type(item).__name__}")
    name = item.get("name")
    if name is None:
        name = ""
    elif not isinstance(name, str):
        raise CodecError(f"invalid name {name!r}")
    address = item.get("ip")
    if address is not None and not isinstance(address, str):
        raise CodecError(f"invalid ip for {name!r}")
    # a record that never announced sorts as oldest and is pruned by the next write
    raw = item.get("last_announce")
    last_seen = NEVER_ANNOUNCED if raw is None else _parse_time(raw)
    return MemberEntry(name=name, address=address, last_seen=last_seen)


def encode(entries: Iterable[MemberEntry]) -> bytes:
    """Serialize the list as a JSON array of ``{name, ip, last_announce}`` records."""
    return json.dumps([_entry_to_dict(e) for e in entries], ensure_ascii=False).encode("utf-8")


def decode(payload: bytes) -> List[MemberEntry]:
    """Parse a payload produced by :func:`encode` (or a compatible writer)."""
    try:
        data = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise CodecError(f"payload is not valid JSON: {e}") from e
    if data is None:
        return []
    if not isinstance(data, list):
        raise CodecError(f"payload must be a JSON array, got {type(data).__name__}")
    return [_entry_from_dict(item) for item in data]
