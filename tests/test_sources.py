"""Tests for the alarm source registry, WAV synthesis and AlarmVoice."""

from __future__ import annotations

import io
import wave

import pytest
from PyQt6.QtMultimedia import QMediaDevices
from PyQt6.QtTest import QTest

from minitimer.audio import sources
from minitimer.audio.sources import (
    ALARM_SOURCES, AlarmSource, AudioLoadFailure,
    lookup_source, resolve_source,
    _generate_alarm, _generate_digital_beep, _generate_gentle_bell,
)
from minitimer.audio.voice import AlarmVoice

from helpers import SignalCollector


# ═══════════════════════════════════════════════════════════════════════
#  REGISTRY
# ═══════════════════════════════════════════════════════════════════════


class TestRegistry:

    def test_builtin_sources(self):
        assert {k: s.path for k, s in ALARM_SOURCES.items()} == {
            "default": "/alarm-sound.mp3",
            "gentle-bell": "/alarm-sound-2.mp3",
            "digital-beep": "/alarm-sound-3.mp3",
        }

    def test_labels(self):
        labels = [s.label for s in ALARM_SOURCES.values()]
        assert labels == ["Default Alarm", "Gentle Bell", "Digital Beep"]

    def test_lookup_by_key_and_path(self):
        assert lookup_source("gentle-bell") is ALARM_SOURCES["gentle-bell"]
        assert lookup_source("/alarm-sound-3.mp3") is ALARM_SOURCES["digital-beep"]
        assert lookup_source("/unknown.mp3") is None

    def test_registry_is_extensible(self, monkeypatch, tmp_path):
        extra = AlarmSource("chime", "Chime", "/chime.mp3", _generate_gentle_bell)
        monkeypatch.setitem(ALARM_SOURCES, "chime", extra)
        path = resolve_source("/chime.mp3", tmp_path)
        assert path == tmp_path / "chime.wav"
        assert path.exists()


# ═══════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════


GENERATORS = [_generate_alarm, _generate_gentle_bell, _generate_digital_beep]


class TestSoundGeneration:

    @pytest.mark.parametrize("gen_fn", GENERATORS)
    def test_generator_produces_wav(self, gen_fn):
        data = gen_fn()
        assert isinstance(data, bytes)
        assert len(data) > 100
        assert data[:4] == b"RIFF"

    @pytest.mark.parametrize("gen_fn", GENERATORS)
    def test_wav_is_parseable(self, gen_fn):
        with wave.open(io.BytesIO(gen_fn()), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == 44100
            assert wf.getnframes() > 0

    def test_envelope_shape(self):
        env = sources._make_envelope(1000, attack=100, decay=100, sustain_level=0.5, release=200)
        assert len(env) == 1000
        assert env[0] == pytest.approx(0.0)
        assert env[99] == pytest.approx(1.0)
        assert env[500] == pytest.approx(0.5)
        assert env[-1] == pytest.approx(0.0)
        assert env.max() <= 1.0


# ═══════════════════════════════════════════════════════════════════════
#  RESOLUTION
# ═══════════════════════════════════════════════════════════════════════


class TestResolveSource:

    @pytest.mark.parametrize("key", list(ALARM_SOURCES))
    def test_builtin_assets_are_synthesised(self, key, tmp_path):
        source = ALARM_SOURCES[key]
        path = resolve_source(source.path, tmp_path)
        assert path == tmp_path / f"{source.stem}.wav"
        assert path.stat().st_size > 100

    def test_cached_file_is_reused(self, tmp_path):
        path = resolve_source("default", tmp_path)
        path.write_bytes(b"custom")
        assert resolve_source("default", tmp_path).read_bytes() == b"custom"

    def test_defaults_to_sounds_dir(self, isolated_home):
        path = resolve_source("/alarm-sound.mp3")
        assert path.parent == isolated_home / "sounds"

    def test_unregistered_existing_file(self, tmp_path):
        (tmp_path / "my-alarm.wav").write_bytes(_generate_alarm())
        assert resolve_source("/my-alarm.mp3", tmp_path) == tmp_path / "my-alarm.wav"

    def test_unregistered_missing_file_raises(self, tmp_path):
        with pytest.raises(AudioLoadFailure):
            resolve_source("/missing.mp3", tmp_path)

    def test_empty_identifier_raises(self, tmp_path):
        with pytest.raises(AudioLoadFailure):
            resolve_source("", tmp_path)

    def test_unwritable_dir_raises(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(AudioLoadFailure):
            resolve_source("default", blocker / "sounds")


# ═══════════════════════════════════════════════════════════════════════
#  QSoundEffect VOICE
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestAlarmVoice:

    def test_create(self, tmp_path):
        path = resolve_source("default", tmp_path)
        voice = AlarmVoice(path, 0.5)
        assert voice.path == path
        assert voice.is_released is False
        voice.release()

    def test_release_twice_is_noop(self, tmp_path):
        voice = AlarmVoice(resolve_source("default", tmp_path), 0.5)
        voice.release()
        voice.release()
        assert voice.is_released
        assert voice.is_ready is False

    def test_calls_after_release_are_ignored(self, tmp_path):
        voice = AlarmVoice(resolve_source("default", tmp_path), 0.5)
        voice.release()
        voice.start()
        voice.halt()
        voice.set_volume(0.2)

    def test_corrupt_file_reports_failure(self, tmp_path):
        if not QMediaDevices.audioOutputs():
            pytest.skip("no audio output available")
        path = tmp_path / "broken.wav"
        path.write_bytes(b"RIFF\x00\x00\x00\x00junkjunkjunk")
        voice = AlarmVoice(path, 0.5)
        failed = SignalCollector()
        ready = SignalCollector()
        voice.failed.connect(failed)
        voice.ready.connect(ready)
        for _ in range(40):
            if failed:
                break
            QTest.qWait(50)
        assert len(failed) == 1
        failed_voice, message = failed.last
        assert failed_voice is voice
        assert "broken.wav" in message
        assert not ready
        assert voice.is_ready is False
        voice.release()

    def test_valid_file_becomes_ready(self, tmp_path):
        if not QMediaDevices.audioOutputs():
            pytest.skip("no audio output available")
        voice = AlarmVoice(resolve_source("digital-beep", tmp_path), 0.5)
        for _ in range(40):
            if voice.is_ready:
                break
            QTest.qWait(50)
        assert voice.is_ready
        voice.release()
