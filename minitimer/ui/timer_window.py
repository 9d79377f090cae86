"""Main window. The whole app is this one card.

Layout (top → bottom):
    - Title row with the fullscreen toggle
    - Large MM:SS readout
    - Start/Pause + Reset buttons
    - Minutes spin box
    - Alarm sound picker with Test / Stop Alarm
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QComboBox, QFrame, QHBoxLayout, QLabel, QMainWindow, QPushButton,
    QSpinBox, QVBoxLayout, QWidget,
)

from ..audio.sources import ALARM_SOURCES, lookup_source
from ..controller import TimerController
from ..settings import save_settings
from ..timer.engine import MAX_MINUTES, MIN_MINUTES, TimerState


logger = logging.getLogger(__name__)


STYLESHEET = """
QMainWindow { background: #F3F4F6; }
QFrame#card { background: #FFFFFF; border-radius: 12px; }
QLabel#title { font-size: 20px; font-weight: bold; color: #1F2937; }
QLabel#clock { font-size: 72px; font-weight: bold; color: #1F2937; }
QLabel#notice { color: #B45309; }
QPushButton#primaryButton {
    background: #4F46E5; color: white; border-radius: 32px;
    min-width: 64px; min-height: 64px; font-weight: bold;
}
QPushButton#primaryButton[running="true"] { background: #EAB308; }
QPushButton#secondaryButton {
    background: #E5E7EB; color: #1F2937; border-radius: 32px;
    min-width: 64px; min-height: 64px;
}
QPushButton#linkButton { border: none; color: #4F46E5; }
"""


class TimerWindow(QMainWindow):
    """Presentational shell.  All behaviour goes through the controller."""

    def __init__(self, controller: TimerController, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        self.setWindowTitle("MiniTimer")
        self.setMinimumSize(420, 520)
        self.setStyleSheet(STYLESHEET)
        self._build_ui()
        self._connect_signals()
        self._refresh_clock()
        self._on_state_changed(controller.engine.state)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget(self)
        root = QVBoxLayout(central)
        root.setContentsMargins(24, 24, 24, 24)
        self.setCentralWidget(central)

        card = QFrame(central)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(32, 24, 32, 28)
        layout.setSpacing(16)

        title_row = QHBoxLayout()
        title = QLabel("MiniTimer", card)
        title.setObjectName("title")
        self._fullscreen_btn = QPushButton("Fullscreen", card)
        self._fullscreen_btn.setObjectName("linkButton")
        title_row.addWidget(title)
        title_row.addStretch(1)
        title_row.addWidget(self._fullscreen_btn)
        layout.addLayout(title_row)

        self._clock = QLabel(card)
        self._clock.setObjectName("clock")
        self._clock.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._clock)

        btn_row = QHBoxLayout()
        btn_row.setSpacing(16)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._toggle_btn = QPushButton("Start", card)
        self._toggle_btn.setObjectName("primaryButton")
        self._reset_btn = QPushButton("Reset", card)
        self._reset_btn.setObjectName("secondaryButton")
        btn_row.addWidget(self._toggle_btn)
        btn_row.addWidget(self._reset_btn)
        layout.addLayout(btn_row)

        layout.addWidget(QLabel("Set Timer (minutes)", card))
        self._minutes_spin = QSpinBox(card)
        self._minutes_spin.setRange(MIN_MINUTES, MAX_MINUTES)
        self._minutes_spin.setValue(self._controller.engine.configured_minutes)
        layout.addWidget(self._minutes_spin)

        sound_row = QHBoxLayout()
        sound_row.addWidget(QLabel("Alarm Sound", card))
        sound_row.addStretch(1)
        self._test_btn = QPushButton("Test", card)
        self._test_btn.setObjectName("linkButton")
        self._stop_alarm_btn = QPushButton("Stop Alarm", card)
        self._stop_alarm_btn.setObjectName("linkButton")
        self._stop_alarm_btn.setVisible(False)
        sound_row.addWidget(self._test_btn)
        sound_row.addWidget(self._stop_alarm_btn)
        layout.addLayout(sound_row)

        self._sound_combo = QComboBox(card)
        for source in ALARM_SOURCES.values():
            self._sound_combo.addItem(source.label, source.path)
        current = lookup_source(self._controller.player.source)
        if current is not None:
            self._sound_combo.setCurrentIndex(self._sound_combo.findData(current.path))
        layout.addWidget(self._sound_combo)

        self._notice = QLabel("", card)
        self._notice.setObjectName("notice")
        self._notice.setWordWrap(True)
        self._notice.setVisible(False)
        layout.addWidget(self._notice)

        layout.addStretch(1)

    def _connect_signals(self) -> None:
        engine = self._controller.engine
        engine.ticked.connect(self._refresh_clock)
        engine.remaining_changed.connect(self._refresh_clock)
        engine.state_changed.connect(self._on_state_changed)
        self._controller.player.playing_changed.connect(self._stop_alarm_btn.setVisible)
        self._controller.notice.connect(self._show_notice)

        self._toggle_btn.clicked.connect(self._controller.toggle)
        self._reset_btn.clicked.connect(self._controller.reset)
        self._test_btn.clicked.connect(self._controller.test_alarm)
        self._stop_alarm_btn.clicked.connect(self._controller.stop_alarm)
        self._minutes_spin.valueChanged.connect(self._controller.set_minutes)
        self._sound_combo.currentIndexChanged.connect(self._on_sound_selected)
        self._fullscreen_btn.clicked.connect(self._toggle_fullscreen)

    # ── slots ─────────────────────────────────────────────────────────────

    def _refresh_clock(self, *_args) -> None:
        self._clock.setText(self._controller.engine.formatted_time)

    def _on_state_changed(self, state: TimerState) -> None:
        running = state == TimerState.RUNNING
        self._toggle_btn.setText("Pause" if running else "Start")
        self._toggle_btn.setProperty("running", running)
        self._toggle_btn.style().unpolish(self._toggle_btn)
        self._toggle_btn.style().polish(self._toggle_btn)
        self._refresh_clock()

    def _on_sound_selected(self, index: int) -> None:
        self._notice.setVisible(False)
        self._controller.set_alarm_source(self._sound_combo.itemData(index))

    def _show_notice(self, message: str) -> None:
        self._notice.setText(f"Alarm sound unavailable: {message}")
        self._notice.setVisible(True)

    def _toggle_fullscreen(self) -> None:
        if self.isFullScreen():
            self.showNormal()
        else:
            self.showFullScreen()
        self._controller.settings.fullscreen = self.isFullScreen()
        self._fullscreen_btn.setText("Exit Fullscreen" if self.isFullScreen() else "Fullscreen")

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Save preferences and release the timer and audio."""
        try:
            save_settings(self._controller.settings)
        except OSError as exc:
            logger.warning("Could not save preferences: %s", exc)
        finally:
            self._controller.dispose()
        event.accept()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Space toggles, Escape resets, F11 toggles fullscreen."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._controller.toggle()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._controller.reset()
            event.accept()
            return
        if key == Qt.Key.Key_F11:
            self._toggle_fullscreen()
            event.accept()
            return
        super().keyPressEvent(event)
