"""UI package."""

from .timer_window import TimerWindow

__all__ = ["TimerWindow"]
