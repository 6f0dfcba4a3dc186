# backend/photo_catalog/services/verification/deadline.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from photo_catalog.exceptions import DeadlineExceeded


@dataclass(frozen=True)
class Deadline:
    """Absolute point on a monotonic clock after which work must stop."""

    expires_at: float
    clock: Callable[[], float] = field(default=time.monotonic, repr=False, compare=False)

    @classmethod
    def after(cls, seconds: float, clock: Callable[[], float] = time.monotonic) -> "Deadline":
        return cls(expires_at=clock() + seconds, clock=clock)

    def remaining(self) -> float:
        return self.expires_at - self.clock()

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def check(self, stage: str) -> None:
        if self.expired:
            raise DeadlineExceeded(f"deadline exceeded during {stage}")


def check_deadline(deadline: Optional[Deadline], stage: str) -> None:
    if deadline is not None:
        deadline.check(stage)
