# src/serverlist/services/retry.py
from __future__ import annotations
import random
import secrets
from dataclasses import dataclass, field
from typing import Optional

from serverlist.config import const


def _seeded_random() -> random.Random:
    return random.Random(secrets.randbits(64))


@dataclass(slots=True)
class RetryPolicy:
    """Jittered backoff between rounds plus optional caps.

    ``max_rounds`` and ``deadline`` default to ``None`` (retry forever). The
    random source is private to the policy and seeded from ``secrets``.
    """

    max_backoff: float = const.MAX_BACKOFF_SECONDS
    max_rounds: Optional[int] = None
    deadline: Optional[float] = None
    rng: random.Random = field(default_factory=_seeded_random)

    def __post_init__(self) -> None:
        if self.max_backoff < 0:
            raise ValueError("max_backoff must be >= 0")
        if self.max_rounds is not None and self.max_rounds < 1:
            raise ValueError("max_rounds must be >= 1")
        if self.deadline is not None and self.deadline <= 0:
            raise ValueError("deadline must be > 0")

    def next_delay(self) -> float:
        return self.rng.uniform(0.0, self.max_backoff)

    def remaining(self, elapsed: float) -> Optional[float]:
        """Seconds left before the deadline, ``None`` without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - elapsed)

    def exhausted(self, rounds: int, elapsed: float) -> Optional[str]:
        """Name of the exhausted budget, or ``None`` while retries are allowed."""
        if self.max_rounds is not None and rounds >= self.max_rounds:
            return f"max rounds ({self.max_rounds})"
        if self.deadline is not None and elapsed >= self.deadline:
            return self.deadline_budget
        return None

    @property
    def deadline_budget(self) -> str:
        return f"deadline ({self.deadline:g}s)"

    @property
    def bounded(self) -> bool:
        return self.max_rounds is not None or self.deadline is not None
