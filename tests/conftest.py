"""Shared pytest fixtures for MiniTimer tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from minitimer.audio.alarm import AlarmPlayer
from minitimer.controller import TimerController
from minitimer.settings import Settings
from minitimer.timer.engine import CountdownEngine

from helpers import FakeVoiceFactory


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point settings and synthesised sounds at a per-test directory."""
    monkeypatch.setattr("minitimer.settings.SETTINGS_PATH", tmp_path / "settings.json")
    monkeypatch.setattr("minitimer.audio.sources.SOUNDS_DIR", tmp_path / "sounds")
    yield tmp_path


@pytest.fixture
def engine(qapp):
    """Fresh CountdownEngine at the 25-minute default."""
    eng = CountdownEngine(parent=None)
    yield eng
    eng.dispose()


@pytest.fixture
def voices():
    """Voice factory whose voices load instantly."""
    return FakeVoiceFactory()


@pytest.fixture
def slow_voices():
    """Voice factory whose voices stay loading until told otherwise."""
    return FakeVoiceFactory(auto_ready=False)


@pytest.fixture
def player(qapp, voices):
    p = AlarmPlayer(parent=None, voice_factory=voices)
    yield p
    p.dispose()


@pytest.fixture
def controller(qapp, voices):
    c = TimerController(parent=None, settings=Settings(), voice_factory=voices)
    yield c
    c.dispose()
