"""Per-request deadline and logger handle."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from powerplants.core.errors import DeadlineExceeded
from powerplants.core.logging_config import request_logger


@dataclass
class RequestContext:
    """Carries the caller's deadline (monotonic seconds) and logging handle."""

    deadline: float | None = None
    logger: logging.LoggerAdapter = field(default_factory=request_logger)

    @classmethod
    def with_timeout(
        cls, timeout: float | None, logger: logging.LoggerAdapter | None = None
    ) -> "RequestContext":
        deadline = time.monotonic() + timeout if timeout is not None else None
        if logger is None:
            return cls(deadline=deadline)
        return cls(deadline=deadline, logger=logger)

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def check(self) -> float | None:
        """Return the remaining time, raising if it is already spent."""

        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceeded("request deadline exceeded")
        return remaining


__all__ = ["RequestContext"]
