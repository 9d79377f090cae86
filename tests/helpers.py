"""Shared test helpers for MiniTimer."""

from pathlib import Path

from PyQt6.QtCore import QObject, pyqtSignal

from minitimer.timer.engine import CountdownEngine, TimerState


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class UseAfterRelease(AssertionError):
    pass


class FakeVoice(QObject):
    """Stands in for AlarmVoice: records what the player asks of it."""

    ready = pyqtSignal(object)
    failed = pyqtSignal(object, str)

    def __init__(self, path: Path, volume: float, parent=None, *, auto_ready=True):
        super().__init__(parent)
        self.path = path
        self.volume = volume
        self.audible = False
        self.starts = 0
        self.release_count = 0
        self._loaded = auto_ready
        self._released = False

    @property
    def is_ready(self) -> bool:
        return self._loaded and not self._released

    @property
    def is_released(self) -> bool:
        return self._released

    def start(self) -> None:
        if self._released:
            raise UseAfterRelease(f"start() on released voice {self.path}")
        self.audible = True
        self.starts += 1

    def halt(self) -> None:
        if self._released:
            raise UseAfterRelease(f"halt() on released voice {self.path}")
        self.audible = False

    def set_volume(self, volume: float) -> None:
        self.volume = volume

    def release(self) -> None:
        self.release_count += 1
        if self._released:
            return
        self._released = True
        self.audible = False

    # ── test controls ─────────────────────────────────────────────────

    def finish_loading(self) -> None:
        self._loaded = True
        self.ready.emit(self)

    def fail(self, message: str = "decode error") -> None:
        self.failed.emit(self, message)


class FakeVoiceFactory:
    """Callable passed as ``voice_factory``; keeps every voice it made."""

    def __init__(self, auto_ready: bool = True):
        self.auto_ready = auto_ready
        self.voices: list[FakeVoice] = []

    def __call__(self, path, volume, parent):
        voice = FakeVoice(path, volume, parent, auto_ready=self.auto_ready)
        self.voices.append(voice)
        return voice

    @property
    def last(self) -> FakeVoice | None:
        return self.voices[-1] if self.voices else None

    @property
    def audible(self) -> list[FakeVoice]:
        return [v for v in self.voices if v.audible]

    @property
    def live(self) -> list[FakeVoice]:
        return [v for v in self.voices if not v.is_released]


def run_to_expiry(engine: CountdownEngine, limit: int = 10_000) -> int:
    """Tick until the engine stops running.  Returns ticks applied."""
    ticks = 0
    while engine.state == TimerState.RUNNING and ticks < limit:
        engine.tick()
        ticks += 1
    return ticks
