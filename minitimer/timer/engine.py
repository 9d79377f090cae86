"""Countdown state machine for MiniTimer.

States
------
IDLE       Not running. Waiting for the user to start.
RUNNING    Counting down, one tick per second.
PAUSED     Frozen mid-countdown.  Same as IDLE for ticking purposes.
EXPIRED    Reached 00:00.  Only ``reset()`` leaves this state.

Transitions
-----------
IDLE → RUNNING                 (start)
RUNNING → PAUSED               (pause)
PAUSED → RUNNING               (start)
RUNNING → EXPIRED              (tick reaches 0, ``expired`` fires once)
Any → IDLE                     (reset)

The engine never touches audio.  Whoever owns it connects ``expired``
to an alarm.
"""

from __future__ import annotations

import logging
import math
import numbers
from enum import Enum

from PyQt6.QtCore import QObject, QTimer, pyqtSignal


logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_MINUTES = 25
DEFAULT_DURATION = DEFAULT_MINUTES * 60
MIN_MINUTES = 1
MAX_MINUTES = 120
TICK_INTERVAL_MS = 1000


# ── helpers ───────────────────────────────────────────────────────────────


def format_time(seconds: int) -> str:
    """Render seconds as ``MM:SS``.  Minutes are not capped at 59."""
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


def coerce_minutes(value: object) -> int | None:
    """Turn user input into a whole number of minutes within range.

    Numbers and numeric strings are truncated and clamped to
    ``[MIN_MINUTES, MAX_MINUTES]``.  Anything else returns ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
    if not isinstance(value, numbers.Real):
        return None
    if not isinstance(value, numbers.Integral):
        if math.isnan(value):
            return None
        if math.isinf(value):
            return MAX_MINUTES if value > 0 else MIN_MINUTES
    return max(MIN_MINUTES, min(int(value), MAX_MINUTES))


# ── tick source ───────────────────────────────────────────────────────────


class _TickSource:
    """One armed periodic tick.  Cancelled at most once, then inert.

    The engine keeps a reference to the live source; a timeout delivered
    by any other source (or after ``cancel``) is dropped.
    """

    def __init__(self, parent: QObject, interval_ms: int, callback) -> None:
        self._callback = callback
        self._cancelled = False
        self._timer = QTimer(parent)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._fire)
        self._timer.start()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._timer.stop()
        self._timer.timeout.disconnect(self._fire)
        self._timer.deleteLater()

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._callback(self)


# ── engine ────────────────────────────────────────────────────────────────


class CountdownEngine(QObject):
    """Qt-driven countdown with an explicit four-state machine.

    Signals
    -------
    ticked(remaining_seconds: int)
        Emitted after every applied tick.
    state_changed(new_state: TimerState)
        Emitted on every state transition.
    remaining_changed(remaining_seconds: int)
        Emitted when ``configure`` or ``reset`` rewrites the clock.
    expired()
        Emitted once per RUNNING → EXPIRED transition.
    """

    ticked = pyqtSignal(int)
    state_changed = pyqtSignal(object)
    remaining_changed = pyqtSignal(int)
    expired = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        minutes: int = DEFAULT_MINUTES,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        configured = coerce_minutes(minutes) or DEFAULT_MINUTES
        self._configured: int = configured * 60
        self._remaining: int = self._configured
        self._state: TimerState = TimerState.IDLE
        self._interval_ms = interval_ms
        self._tick_source: _TickSource | None = None
        self._disposed = False

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def configured_seconds(self) -> int:
        """Duration restored by ``reset()``."""
        return self._configured

    @property
    def configured_minutes(self) -> int:
        return self._configured // 60

    @property
    def formatted_time(self) -> str:
        return format_time(self._remaining)

    @property
    def is_running(self) -> bool:
        return self._state == TimerState.RUNNING

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the configured duration."""
        if self._configured <= 0:
            return 0.0
        elapsed = self._configured - self._remaining
        return max(0.0, min(1.0, elapsed / self._configured))

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def configure(self, minutes: object) -> None:
        """Set the duration.  Rewrites the clock unless RUNNING.

        Out-of-range numbers are clamped to 1-120 minutes; non-numeric
        input is ignored.
        """
        coerced = coerce_minutes(minutes)
        if coerced is None:
            logger.debug("Ignoring non-numeric duration %r", minutes)
            return
        self._configured = coerced * 60
        if self._state != TimerState.RUNNING:
            self._remaining = self._configured
            self.remaining_changed.emit(self._remaining)

    def start(self) -> None:
        """Start or resume.  No-op while RUNNING or EXPIRED."""
        if self._disposed:
            return
        if self._state not in (TimerState.IDLE, TimerState.PAUSED):
            return
        self._cancel_ticks()
        self._tick_source = _TickSource(self, self._interval_ms, self._on_tick)
        self._set_state(TimerState.RUNNING)

    def pause(self) -> None:
        """Freeze the countdown.  No-op unless RUNNING."""
        if self._state != TimerState.RUNNING:
            return
        self._cancel_ticks()
        self._set_state(TimerState.PAUSED)

    def toggle(self) -> None:
        if self._state == TimerState.RUNNING:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        """Return to IDLE with the configured duration, from any state."""
        self._cancel_ticks()
        self._remaining = self._configured
        self.remaining_changed.emit(self._remaining)
        self._set_state(TimerState.IDLE)

    def dispose(self) -> None:
        """Tear down: cancel any pending tick.  Safe to call repeatedly."""
        self._cancel_ticks()
        self._disposed = True

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def tick(self) -> None:
        """Apply one second of countdown.  Ignored unless RUNNING.

        Reaching 0 cancels the tick source, moves to EXPIRED and emits
        ``expired``.  EXPIRED ignores further ticks, so it fires once.
        """
        if self._state != TimerState.RUNNING:
            return
        self._remaining = max(0, self._remaining - 1)
        self.ticked.emit(self._remaining)
        if self._remaining <= 0:
            self._expire()

    def _on_tick(self, source: _TickSource) -> None:
        if source is not self._tick_source:
            logger.debug("Discarding tick from a cancelled source")
            return
        self.tick()

    def _expire(self) -> None:
        self._cancel_ticks()
        self._set_state(TimerState.EXPIRED)
        logger.info("Countdown expired")
        self.expired.emit()

    def _cancel_ticks(self) -> None:
        source, self._tick_source = self._tick_source, None
        if source is not None:
            source.cancel()

    def _set_state(self, new_state: TimerState) -> None:
        if new_state == self._state:
            return
        logger.debug("State %s → %s", self._state.value, new_state.value)
        self._state = new_state
        self.state_changed.emit(new_state)
