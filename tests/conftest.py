# tests/conftest.py
from __future__ import annotations
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from serverlist.adapters.store import InMemoryStore
from serverlist.domain import AddressLookup
from serverlist.services.retry import RetryPolicy
from serverlist.services.sync_engine import MembershipSyncEngine

T0 = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)

ENTROPY_HEX = "11" * 32
TWEAK_HEX = "22" * 32


# ---- fake time: sleep advances the clock ----
class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.now = start
        self.mono = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> datetime:
        return self.now

    def monotonic(self) -> float:
        return self.mono

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)
        self.mono += seconds


class StaticIdentity:
    def __init__(self, name: str, address: Optional[str] = None) -> None:
        self.name = name
        self.address = address
        self.lookups = 0

    def own_name(self) -> str:
        return self.name

    def own_address(self) -> AddressLookup:
        self.lookups += 1
        if self.address is None:
            return AddressLookup.unavailable("lookup disabled")
        return AddressLookup.resolved(self.address)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def make_engine(clock):
    """Engine factory with fake time and a deterministic backoff."""

    def _make(store, identity, *, max_rounds: Optional[int] = None, **kw) -> MembershipSyncEngine:
        policy = kw.pop("policy", None) or RetryPolicy(max_rounds=max_rounds, rng=random.Random(7))
        return MembershipSyncEngine(
            store,
            identity,
            locator=lambda: "AQ-locator",
            policy=policy,
            clock=kw.pop("clock", clock),
            sleep=kw.pop("sleep", clock.sleep),
            monotonic=kw.pop("monotonic", clock.monotonic),
            **kw,
        )

    return _make


@pytest.fixture
def env(monkeypatch):
    """A complete, valid environment."""
    values = {
        "SKYNET_SERVER_API": "https://dev1.siasky.dev",
        "SERVERLIST_ENTROPY": ENTROPY_HEX,
        "SERVERLIST_TWEAK": TWEAK_HEX,
        "SIA_API_PASSWORD": "secret-password",
    }
    for k in (
        "SERVERLIST_SKYD",
        "SERVERLIST_IP_SERVICE",
        "SERVERLIST_MAX_ROUNDS",
        "SERVERLIST_DEADLINE",
        "SERVERLIST_STRICT_VERIFY",
        "SERVERLIST_LOG_LEVEL",
    ):
        monkeypatch.delenv(k, raising=False)
    for k, v in values.items():
        monkeypatch.setenv(k, v)
    return values


# ---------- CLI ----------
@pytest.fixture
def cli_app():
    from serverlist.apps.cli.app import app

    return app


@pytest.fixture(autouse=True)
def _reset_logging():
    """setup_logging() binds handlers to the streams of the current test."""
    yield
    logger = logging.getLogger("serverlist")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
