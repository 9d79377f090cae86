"""Composes the countdown and the alarm for the window.

The engine and the player never see each other.  Everything that
couples them lives here:

- the countdown expiring starts the alarm
- toggling the countdown (start or pause) silences a sounding alarm
- resetting the countdown silences the alarm
"""

from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QObject, pyqtSignal

from .audio.alarm import AlarmPlayer, VoiceFactory
from .settings import Settings
from .timer.engine import CountdownEngine, TimerState


logger = logging.getLogger(__name__)


class TimerController(QObject):
    """Owns one ``CountdownEngine`` and one ``AlarmPlayer``.

    Signals
    -------
    notice(message: str)
        Non-blocking message for the user (alarm problems).
    """

    notice = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: Settings | None = None,
        sounds_dir: Path | None = None,
        voice_factory: VoiceFactory | None = None,
        interval_ms: int | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings or Settings()

        engine_kwargs = {"minutes": self._settings.default_minutes}
        if interval_ms is not None:
            engine_kwargs["interval_ms"] = interval_ms
        self._engine = CountdownEngine(self, **engine_kwargs)
        self._player = AlarmPlayer(
            self,
            source=self._settings.alarm_source,
            volume=self._settings.alarm_volume,
            sounds_dir=sounds_dir,
            voice_factory=voice_factory,
        )
        self._disposed = False

        self._engine.expired.connect(self._on_expired)
        self._player.warning.connect(self.notice)

    # ── accessors ─────────────────────────────────────────────────────

    @property
    def engine(self) -> CountdownEngine:
        return self._engine

    @property
    def player(self) -> AlarmPlayer:
        return self._player

    @property
    def settings(self) -> Settings:
        return self._settings

    # ── controls ──────────────────────────────────────────────────────

    def toggle(self) -> None:
        """Start or pause.  Either way a sounding alarm is silenced."""
        self._player.stop()
        self._engine.toggle()

    def reset(self) -> None:
        self._engine.reset()
        self._player.stop()

    def set_minutes(self, value: object) -> None:
        self._engine.configure(value)
        self._settings.default_minutes = self._engine.configured_minutes

    def set_alarm_source(self, source_ref: str) -> None:
        self._player.set_source(source_ref)
        self._settings.alarm_source = source_ref

    def set_alarm_volume(self, level: int) -> None:
        self._player.set_volume(level)
        self._settings.alarm_volume = self._player.volume

    def test_alarm(self) -> None:
        self._player.test_play()

    def stop_alarm(self) -> None:
        self._player.stop()

    def dispose(self) -> None:
        """Cancel ticking and release audio.  Safe to call repeatedly."""
        if self._disposed:
            return
        self._disposed = True
        self._engine.dispose()
        self._player.dispose()

    # ── internal ──────────────────────────────────────────────────────

    def _on_expired(self) -> None:
        if self._engine.state != TimerState.EXPIRED:
            return
        logger.info("Time is up, sounding alarm")
        self._player.play()
