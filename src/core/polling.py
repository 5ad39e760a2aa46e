"""Fixed-interval polling.

Every wait in the startup sequence has the same shape: check a condition,
and while it does not hold, sleep and check again. Loops are unbounded unless
a policy says otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from core.interfaces.clock import Sleeper


@dataclass(frozen=True)
class PollPolicy:
    """How long to sleep between checks and how many sleeps are allowed."""

    interval: float
    max_attempts: int | None = None


class PollExhausted(RuntimeError):
    """Raised when a bounded poll runs out of attempts."""

    def __init__(self, description: str, waits: int) -> None:
        super().__init__(f"Gave up waiting for {description} after {waits} attempt(s)")
        self.description = description
        self.waits = waits


def poll_until(
    condition: Callable[[], bool],
    *,
    policy: PollPolicy,
    sleep: Sleeper,
    description: str = "condition",
    on_wait: Callable[[int], None] | None = None,
) -> int:
    """Block until `condition()` is true and return the number of sleeps taken.

    `on_wait` receives the 1-based wait number right before each sleep.
    """

    waits = 0
    while not condition():
        if policy.max_attempts is not None and waits >= policy.max_attempts:
            raise PollExhausted(description, waits)
        waits += 1
        if on_wait:
            on_wait(waits)
        sleep(policy.interval)
    return waits
