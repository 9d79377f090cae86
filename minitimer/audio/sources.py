"""Alarm source registry and WAV synthesis.

Each alarm is addressed by a source identifier, the asset path the UI
stores (``/alarm-sound.mp3``) or the registry key (``gentle-bell``).
``QSoundEffect`` only decodes WAV, so an identifier resolves to
``<sounds_dir>/<stem>.wav``.  The built-in assets are generated with
sine-wave synthesis on first use and cached.

Sources
-------
- ``default``       insistent two-tone alarm
- ``gentle-bell``   soft bell with a long decay
- ``digital-beep``  short square-ish beeps

Adding a sound means adding an ``AlarmSource`` entry (and a generator
if no asset file ships with it).  Nothing else changes.
"""

from __future__ import annotations

import io
import logging
import wave
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import numpy as np

from ..settings import APP_HOME


logger = logging.getLogger(__name__)


class AudioLoadFailure(Exception):
    """An alarm asset is missing, undecodable, or cannot be played."""


# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_HOME / "sounds"

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.full(length, sustain_level, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    d_end = min(a + decay, length)
    if d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    r_start = max(length - release, d_end)
    if r_start < length:
        env[r_start:] = np.linspace(env[r_start - 1] if r_start else 1.0, 0.0, length - r_start)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit mono PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════
#
# Each clip is one loop period.  Clips end on silence so the seam is
# inaudible when QSoundEffect repeats them.


def _generate_alarm() -> bytes:
    """Default alarm: alternating 880 Hz / 660 Hz tones, four pulses."""
    parts: list[np.ndarray] = []
    for freq in (880.0, 660.0, 880.0, 660.0):
        tone = _sine(freq, 0.18) * 0.6
        env = _make_envelope(len(tone), attack=120, decay=300, sustain_level=0.8, release=400)
        parts.append(tone * env)
        parts.append(_silence(0.04))
    parts.append(_silence(0.3))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_gentle_bell() -> bytes:
    """Gentle bell: A4 with a quiet octave overtone, long decay."""
    duration = 1.6
    combined = _sine(440.0, duration) * 0.4 + _sine(880.0, duration) * 0.08
    env = _make_envelope(
        len(combined),
        attack=int(SAMPLE_RATE * 0.02),
        decay=int(SAMPLE_RATE * 0.4),
        sustain_level=0.25,
        release=int(SAMPLE_RATE * 1.0),
    )
    return _to_wav_bytes(np.concatenate([combined * env, _silence(0.4)]))


def _generate_digital_beep() -> bytes:
    """Digital beep: three clipped 1 kHz beeps, like a wristwatch."""
    beep = np.sign(_sine(1000.0, 0.08)) * 0.3
    env = _make_envelope(len(beep), attack=30, decay=0, sustain_level=1.0, release=60)
    beep = beep * env
    gap = _silence(0.08)
    return _to_wav_bytes(np.concatenate([beep, gap, beep, gap, beep, _silence(0.5)]))


# ═══════════════════════════════════════════════════════════════════════════
#  REGISTRY
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AlarmSource:
    key: str
    label: str
    path: str
    generator: Callable[[], bytes] | None = None

    @property
    def stem(self) -> str:
        return Path(self.path).stem


ALARM_SOURCES: dict[str, AlarmSource] = {
    source.key: source
    for source in (
        AlarmSource("default", "Default Alarm", "/alarm-sound.mp3", _generate_alarm),
        AlarmSource("gentle-bell", "Gentle Bell", "/alarm-sound-2.mp3", _generate_gentle_bell),
        AlarmSource("digital-beep", "Digital Beep", "/alarm-sound-3.mp3", _generate_digital_beep),
    )
}

DEFAULT_SOURCE = ALARM_SOURCES["default"].path


def lookup_source(source_ref: str) -> AlarmSource | None:
    """Find a registered source by key or by asset path."""
    if source_ref in ALARM_SOURCES:
        return ALARM_SOURCES[source_ref]
    for source in ALARM_SOURCES.values():
        if source.path == source_ref:
            return source
    return None


def resolve_source(source_ref: str, sounds_dir: Path | None = None) -> Path:
    """Return a playable WAV path for *source_ref*.

    Registered sources are synthesised into *sounds_dir* when missing.
    Unregistered identifiers must already exist there as
    ``<stem>.wav``.

    Raises ``AudioLoadFailure`` when no asset can be produced.
    """
    sounds_dir = sounds_dir or SOUNDS_DIR
    source = lookup_source(source_ref)
    stem = source.stem if source is not None else Path(str(source_ref)).stem
    if not stem:
        raise AudioLoadFailure(f"Invalid alarm source {source_ref!r}")

    path = sounds_dir / f"{stem}.wav"
    if path.exists():
        return path
    if source is None or source.generator is None:
        raise AudioLoadFailure(f"No asset for alarm source {source_ref!r}")

    try:
        sounds_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(source.generator())
    except OSError as exc:
        raise AudioLoadFailure(f"Could not write {path}: {exc}") from exc
    logger.debug("Synthesised alarm asset %s", path)
    return path
