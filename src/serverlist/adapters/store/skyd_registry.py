from __future__ import annotations
import base64
import logging
from typing import Optional

import httpx

from serverlist.config import const
from serverlist.domain import StoreRecord
from serverlist.ports.store import RemoteStorePort
from serverlist.services.errors import ConflictError, RecordNotFound, TransientStoreError
from serverlist.services.keys import StoreKeys

log = logging.getLogger("serverlist.store")


def _error_message(r: httpx.Response) -> str:
    try:
        return str(r.json().get("message") or r.text)
    except (ValueError, AttributeError):
        return r.text


class SkydRegistryStore(RemoteStorePort):
    """The shared record as a Skynet registry entry, through the local skyd API."""

    def __init__(
        self,
        keys: StoreKeys,
        address: str,
        password: str,
        *,
        timeout: float = const.SKYD_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.keys = keys
        base = address if address.startswith(("http://", "https://")) else f"http://{address}"
        self._http = httpx.Client(
            base_url=base.rstrip("/"),
            auth=("", password),
            headers={"User-Agent": const.SKYD_USER_AGENT},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def read(self) -> StoreRecord:
        params = {"publickey": self.keys.public_key_string(), "datakey": self.keys.tweak.hex()}
        try:
            r = self._http.get("/skynet/registry", params=params)
        except httpx.HTTPError as e:
            raise TransientStoreError(f"failed to read from skyd: {e}") from e
        if r.status_code == 404:
            raise RecordNotFound("registry entry not found")
        if r.status_code != 200:
            raise TransientStoreError(f"failed to read from skyd: HTTP {r.status_code}: {_error_message(r)}")
        try:
            body = r.json()
            record = StoreRecord(payload=bytes.fromhex(body["data"]), revision=int(body["revision"]))
        except (ValueError, KeyError, TypeError) as e:
            raise TransientStoreError(f"unexpected registry response: {e}") from e
        log.debug("store.read", extra={"extra": {"revision": record.revision, "bytes": len(record.payload)}})
        return record

    def write(self, payload: bytes, revision: int) -> None:
        signature = self.keys.sign_entry(payload, revision)
        body = {
            "publickey": self.keys.public_key_string(),
            "datakey": self.keys.tweak.hex(),
            "revision": revision,
            "data": base64.b64encode(payload).decode("ascii"),
            "signature": list(signature),
        }
        try:
            r = self._http.post("/skynet/registry", json=body)
        except httpx.HTTPError as e:
            raise TransientStoreError(f"failed to write to skyd: {e}") from e
        if r.status_code in (200, 204):
            log.debug("store.write", extra={"extra": {"revision": revision, "bytes": len(payload)}})
            return
        message = _error_message(r)
        if "revision" in message.lower():
            raise ConflictError(revision, message=f"revision {revision} rejected: {message}")
        raise TransientStoreError(f"failed to write to skyd: HTTP {r.status_code}: {message}")
