"""Looping alarm playback with a replaceable source.

The player owns at most one ``AlarmVoice`` at a time.  Changing the
source halts the old voice, loads the new one and releases the old one,
so two loops are never audible together.

Usage::

    player = AlarmPlayer(parent=self)
    player.set_volume(50)
    engine.expired.connect(player.play)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal

from .sources import DEFAULT_SOURCE, AudioLoadFailure, resolve_source
from .voice import AlarmVoice


logger = logging.getLogger(__name__)

DEFAULT_VOLUME = 50  # percent

VoiceFactory = Callable[[Path, float, QObject], AlarmVoice]


def _coerce_volume(level: object, fallback: int) -> int:
    """Clamp *level* to 0-100, or return *fallback* if it is not a number."""
    if isinstance(level, bool):
        return fallback
    try:
        level = int(level)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring invalid alarm volume %r", level)
        return fallback
    return max(0, min(level, 100))


class AlarmPlayer(QObject):
    """Plays the selected alarm in a loop until stopped.

    Signals
    -------
    playing_changed(is_playing: bool)
        Emitted whenever ``is_playing`` flips.
    warning(message: str)
        Emitted when the alarm cannot be loaded or played.  Non-fatal.
    """

    playing_changed = pyqtSignal(bool)
    warning = pyqtSignal(str)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        source: str = DEFAULT_SOURCE,
        volume: int = DEFAULT_VOLUME,
        sounds_dir: Path | None = None,
        voice_factory: VoiceFactory | None = None,
    ) -> None:
        super().__init__(parent)
        self._source = source
        self._volume = _coerce_volume(volume, DEFAULT_VOLUME) / 100.0
        self._sounds_dir = sounds_dir
        self._voice_factory: VoiceFactory = voice_factory or AlarmVoice

        self._voice: AlarmVoice | None = None
        self._playing = False
        self._start_pending = False  # play requested while the voice loads
        self._failed = False
        self._disposed = False

    # ── public API ────────────────────────────────────────────────────

    @property
    def source(self) -> str:
        return self._source

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Applies to the loaded voice immediately.

        Non-numeric levels are ignored.
        """
        self._volume = _coerce_volume(level, self.volume) / 100.0
        if self._voice is not None:
            self._voice.set_volume(self._volume)

    def set_source(self, source_ref: str) -> None:
        """Switch to another alarm sound.

        If the alarm is sounding it keeps sounding, now with the new
        audio.  The latest call wins over any load still in flight.
        """
        if self._disposed:
            return
        was_playing = self._playing
        old = self._voice
        if old is not None:
            old.halt()
        self._voice = None
        self._start_pending = False
        self._source = source_ref
        self._failed = False
        logger.info("Alarm source set to %s", source_ref)
        try:
            if was_playing:
                self._begin_playback()
        finally:
            self._release(old)

    def play(self) -> None:
        """Start looping the current source.  No-op if already playing."""
        if self._disposed or self._playing:
            return
        if self._failed:
            logger.warning("Alarm source %s is unavailable, not playing", self._source)
            return
        self._set_playing(True)
        self._begin_playback()

    def stop(self) -> None:
        """Silence the alarm.  The voice stays loaded for a quick restart."""
        if not self._playing:
            return
        self._start_pending = False
        if self._voice is not None:
            self._voice.halt()
        self._set_playing(False)

    def test_play(self) -> None:
        """Preview the current source from the top."""
        self.stop()
        self.play()

    def dispose(self) -> None:
        """Stop and release everything.  Safe to call repeatedly."""
        if self._disposed:
            return
        self.stop()
        voice, self._voice = self._voice, None
        self._release(voice)
        self._disposed = True

    # ── internal ──────────────────────────────────────────────────────

    def _begin_playback(self) -> None:
        voice = self._acquire()
        if voice is None:
            return
        if voice.is_ready:
            voice.start()
        else:
            self._start_pending = True

    def _acquire(self) -> AlarmVoice | None:
        """Load the current source if nothing is loaded yet."""
        if self._voice is not None:
            return self._voice
        try:
            path = resolve_source(self._source, self._sounds_dir)
            voice = self._voice_factory(path, self._volume, self)
        except AudioLoadFailure as exc:
            self._fail(str(exc))
            return None
        voice.ready.connect(self._on_voice_ready)
        voice.failed.connect(self._on_voice_failed)
        self._voice = voice
        return voice

    def _release(self, voice: AlarmVoice | None) -> None:
        if voice is not None:
            voice.release()

    def _on_voice_ready(self, voice: AlarmVoice) -> None:
        if voice is not self._voice:
            logger.debug("Discarding ready signal from a superseded alarm voice")
            return
        if self._start_pending and self._playing:
            self._start_pending = False
            voice.start()

    def _on_voice_failed(self, voice: AlarmVoice, message: str) -> None:
        if voice is not self._voice:
            logger.debug("Discarding failure from a superseded alarm voice")
            return
        self._voice = None
        self._release(voice)
        self._fail(message)

    def _fail(self, message: str) -> None:
        self._failed = True
        self._start_pending = False
        logger.warning("Alarm unavailable: %s", message)
        self._set_playing(False)
        self.warning.emit(message)

    def _set_playing(self, playing: bool) -> None:
        if playing == self._playing:
            return
        self._playing = playing
        self.playing_changed.emit(playing)
