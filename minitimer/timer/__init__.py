"""Timer package."""

from .engine import (
    CountdownEngine,
    TimerState,
    DEFAULT_MINUTES,
    DEFAULT_DURATION,
    MIN_MINUTES,
    MAX_MINUTES,
    format_time,
    coerce_minutes,
)

__all__ = [
    "CountdownEngine",
    "TimerState",
    "DEFAULT_MINUTES",
    "DEFAULT_DURATION",
    "MIN_MINUTES",
    "MAX_MINUTES",
    "format_time",
    "coerce_minutes",
]
