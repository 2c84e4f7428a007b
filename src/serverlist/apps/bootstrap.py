# src/serverlist/apps/bootstrap.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from serverlist.adapters.identity import HttpIdentity
from serverlist.adapters.store import SkydRegistryStore
from serverlist.ports import IdentityPort, RemoteStorePort
from serverlist.services.keys import StoreKeys
from serverlist.services.logging import setup_logging
from serverlist.services.retry import RetryPolicy
from serverlist.services.settings import Settings
from serverlist.services.sync_engine import MembershipSyncEngine


@dataclass(slots=True)
class SyncContext:
    settings: Settings
    keys: StoreKeys
    store: RemoteStorePort
    identity: IdentityPort
    logger: logging.Logger

    def engine(self, **kw) -> MembershipSyncEngine:
        policy = RetryPolicy(max_rounds=self.settings.max_rounds or None, deadline=self.settings.deadline or None)
        return MembershipSyncEngine(
            self.store,
            self.identity,
            locator=self.keys.locator,
            policy=policy,
            strict_verify=self.settings.strict_verify,
            logger=self.logger.getChild("sync"),
            **kw,
        )

    def close(self) -> None:
        close = getattr(self.store, "close", None)
        if callable(close):
            close()


def build_context(
    settings: Settings,
    *,
    logfile: Optional[Path] = None,
    store: Optional[RemoteStorePort] = None,
    identity: Optional[IdentityPort] = None,
) -> SyncContext:
    """Wire settings into real adapters; ``store``/``identity`` replace them in tests."""
    logger = setup_logging(settings.log_level, logfile)
    keys = StoreKeys.from_entropy(settings.entropy, settings.tweak)
    if store is None:
        store = SkydRegistryStore(keys, settings.skyd_address, settings.api_password)
    if identity is None:
        identity = HttpIdentity(settings.own_name, settings.ip_service_url)
    logger.debug(
        "bootstrap.ready",
        extra={"extra": {"name": settings.own_name, "skyd": settings.skyd_address, "pubkey": keys.public_key_string()}},
    )
    return SyncContext(settings=settings, keys=keys, store=store, identity=identity, logger=logger)
