from __future__ import annotations
import re

import requests

from serverlist.config import const
from serverlist.domain import AddressLookup
from serverlist.ports.identity import IdentityPort

# IPv4 only
_IPV4 = re.compile(r"^[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}$")


class HttpIdentity(IdentityPort):
    """Own name from settings, external address from a plain-text lookup service."""

    def __init__(self, name: str, url: str = const.IP_SERVICE_URL, timeout: float = const.IP_SERVICE_TIMEOUT_SECONDS) -> None:
        self._name = name
        self.url = url
        self.timeout = timeout

    def own_name(self) -> str:
        return self._name

    def own_address(self) -> AddressLookup:
        try:
            r = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            return AddressLookup.unavailable(f"failed to query {self.url}: {e}")
        if r.status_code != 200:
            return AddressLookup.unavailable(f"failed to query {self.url}: HTTP {r.status_code}")
        ip = r.text.strip()
        if not _IPV4.match(ip):
            return AddressLookup.unavailable(f"invalid ip received {ip[:64]!r}")
        return AddressLookup.resolved(ip)
