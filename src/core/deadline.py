"""Per-call deadlines for workflow operations."""

import time
from dataclasses import dataclass
from typing import Optional

from src.core.errors import StorageTimeoutError


@dataclass(frozen=True)
class Deadline:
    """Absolute point on the monotonic clock after which a call is abandoned."""

    expires_at: float
    timeout: float

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(expires_at=time.monotonic() + seconds, timeout=seconds)

    @classmethod
    def optional(cls, seconds: Optional[float]) -> Optional["Deadline"]:
        """None or non-positive seconds means no deadline."""
        if seconds is None or seconds <= 0:
            return None
        return cls.after(seconds)

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self, operation: str) -> None:
        if self.expired:
            raise StorageTimeoutError(
                f"{operation} timed out", detail=f"timeout={self.timeout}s"
            )
