# src/serverlist/services/sync_engine.py
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from serverlist.config import const
from serverlist.domain import MemberEntry
from serverlist.ports import IdentityPort, RemoteStorePort
from serverlist.services import codec
from serverlist.services.errors import (
    CodecError,
    ConfigError,
    RecordNotFound,
    RetryExhausted,
    TransientStoreError,
    VerificationFailure,
)
from serverlist.services.membership import find_entry, is_fresh, prune_stale, upsert_self
from serverlist.services.retry import RetryPolicy

# errors that fail a single round; anything else is a bug and propagates
ROUND_ERRORS = (TransientStoreError, CodecError, VerificationFailure)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class SyncTiming:
    retention: timedelta = timedelta(seconds=const.RETENTION_SECONDS)
    freshness: timedelta = timedelta(seconds=const.FRESHNESS_SECONDS)
    settle: float = const.SETTLE_SECONDS


class MembershipSyncEngine:
    """Publishes our own entry into the shared list and waits until it sticks.

    Every round reads the list with its revision, refreshes our entry, prunes
    stale hosts, writes at ``revision + 1``, pauses, and re-reads to confirm
    the entry is there and fresh. A failed round is retried after a random
    delay from the :class:`RetryPolicy`.
    """

    def __init__(
        self,
        store: RemoteStorePort,
        identity: IdentityPort,
        *,
        locator: Callable[[], str],
        policy: Optional[RetryPolicy] = None,
        timing: Optional[SyncTiming] = None,
        strict_verify: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
        sleep: Optional[Callable[[float], None]] = None,
        monotonic: Optional[Callable[[], float]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.store = store
        self.identity = identity
        self.policy = policy or RetryPolicy()
        self.timing = timing or SyncTiming()
        self.strict_verify = strict_verify
        self._locator = locator
        self._clock = clock or utcnow
        self._sleep = sleep or time.sleep
        self._monotonic = monotonic or time.monotonic
        self.log = logger or logging.getLogger("serverlist.sync")

        name = (identity.own_name() or "").strip()
        if not name:
            raise ConfigError(const.ENV_OWN_NAME, f"own name is empty. is {const.ENV_OWN_NAME} defined?")
        self.own_name = name

    def run(self) -> str:
        """Retry rounds until one is verified, then return the locator."""
        rounds = 0
        started = self._monotonic()
        while True:
            rounds += 1
            self.log.info("sync.round.start", extra={"extra": {"round": rounds, "name": self.own_name}})
            try:
                entries = self.sync_once()
            except ROUND_ERRORS as e:
                self.log.warning(
                    "sync.round.failed",
                    extra={"extra": {"round": rounds, "error": str(e), "kind": type(e).__name__}},
                )
                elapsed = self._monotonic() - started
                budget = self.policy.exhausted(rounds, elapsed)
                if budget:
                    raise RetryExhausted(rounds, budget, last_error=e) from e
                delay = self.policy.next_delay()
                remaining = self.policy.remaining(elapsed)
                # no round may start past the deadline
                if remaining is not None and delay >= remaining:
                    raise RetryExhausted(rounds, self.policy.deadline_budget, last_error=e) from e
                self.log.info("sync.backoff", extra={"extra": {"round": rounds, "seconds": round(delay, 3)}})
                self._sleep(delay)
                budget = self.policy.exhausted(rounds, self._monotonic() - started)
                if budget:
                    raise RetryExhausted(rounds, budget, last_error=e) from e
                continue
            self.log.info("sync.done", extra={"extra": {"rounds": rounds, "members": len(entries)}})
            return self._locator()

    def sync_once(self) -> List[MemberEntry]:
        """One read-upsert-prune-write-verify round. Raises the round's error on failure."""
        entries, revision = self.read_list()

        lookup = self.identity.own_address()
        if not lookup.available:
            self.log.warning("identity.address.unavailable", extra={"extra": {"reason": lookup.reason}})

        now = self._clock()
        upserted = upsert_self(entries, self.own_name, lookup, now)
        updated = prune_stale(upserted, self.timing.retention, now)
        if len(updated) < len(upserted):
            self.log.info("sync.pruned", extra={"extra": {"count": len(upserted) - len(updated)}})

        self.store.write(codec.encode(updated), revision + 1)
        self.log.info("sync.write.ok", extra={"extra": {"revision": revision + 1, "members": len(updated)}})

        # the verifying read must not race ahead of the write
        self._sleep(self.timing.settle)
        self._verify(find_entry(updated, self.own_name))
        return updated

    def read_list(self) -> Tuple[List[MemberEntry], int]:
        """Current list and revision; a record that was never written is empty at revision 0."""
        try:
            record = self.store.read()
        except RecordNotFound:
            self.log.info("sync.read.not_found")
            return [], 0
        entries = codec.decode(record.payload)
        self.log.debug("sync.read.ok", extra={"extra": {"revision": record.revision, "members": len(entries)}})
        return entries, record.revision

    def _verify(self, expected: Optional[MemberEntry]) -> None:
        try:
            entries, revision = self.read_list()
        except (TransientStoreError, CodecError) as e:
            raise VerificationFailure(f"verifying read failed: {e}") from e
        entry = find_entry(entries, self.own_name)
        if entry is None:
            raise VerificationFailure(f"own entry missing at revision {revision}")
        if not is_fresh(entry, self.timing.freshness, self._clock()):
            raise VerificationFailure(f"own entry is stale (last seen {entry.last_seen.isoformat()})")
        if self.strict_verify and entry != expected:
            raise VerificationFailure("stored entry differs from the one written")
