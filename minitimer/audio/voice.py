"""A single loaded alarm asset backed by ``QSoundEffect``."""

from __future__ import annotations

from pathlib import Path

from PyQt6.QtCore import QObject, QUrl, pyqtSignal
from PyQt6.QtMultimedia import QSoundEffect


class AlarmVoice(QObject):
    """Loads one WAV file and loops it until halted.

    Loading is asynchronous.  ``ready(voice)`` or ``failed(voice, message)``
    reports the outcome; both carry the voice so the owner can tell a
    current voice from a superseded one.

    ``release()`` frees the effect.  It is safe to call more than once,
    and a released voice ignores ``start`` and ``halt``.
    """

    ready = pyqtSignal(object)
    failed = pyqtSignal(object, str)

    def __init__(self, path: Path, volume: float, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._path = path
        self._released = False
        self._effect = QSoundEffect(self)
        self._effect.setLoopCount(QSoundEffect.Loop.Infinite.value)
        self._effect.setVolume(volume)
        self._effect.statusChanged.connect(self._on_status_changed)
        self._effect.setSource(QUrl.fromLocalFile(str(path)))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_ready(self) -> bool:
        return (
            not self._released
            and self._effect.status() == QSoundEffect.Status.Ready
        )

    @property
    def is_released(self) -> bool:
        return self._released

    def start(self) -> None:
        if self._released:
            return
        self._effect.play()

    def halt(self) -> None:
        if self._released:
            return
        self._effect.stop()

    def set_volume(self, volume: float) -> None:
        if self._released:
            return
        self._effect.setVolume(volume)

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self.blockSignals(True)
        self._effect.statusChanged.disconnect(self._on_status_changed)
        self._effect.stop()
        self._effect.deleteLater()
        self.deleteLater()

    def _on_status_changed(self) -> None:
        status = self._effect.status()
        if status == QSoundEffect.Status.Ready:
            self.ready.emit(self)
        elif status == QSoundEffect.Status.Error:
            self.failed.emit(self, f"Could not decode {self._path.name}")
