from __future__ import annotations
from typing import Protocol

from serverlist.domain import AddressLookup


class IdentityPort(Protocol):
    def own_name(self) -> str: ...
    def own_address(self) -> AddressLookup: ...
