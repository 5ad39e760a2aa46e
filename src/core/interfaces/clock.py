from __future__ import annotations

from typing import Protocol


class Sleeper(Protocol):
    """Anything that blocks for a number of seconds (`time.sleep` fits)."""

    def __call__(self, seconds: float, /) -> None:
        ...
