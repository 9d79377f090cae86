"""Allow running MiniTimer as a module: python -m minitimer."""

import sys

from PyQt6.QtWidgets import QApplication

from .controller import TimerController
from .log import setup_logging
from .settings import load_settings
from .ui.timer_window import TimerWindow


def main() -> None:
    setup_logging()

    app = QApplication(sys.argv)
    app.setApplicationName("MiniTimer")
    app.setOrganizationName("MiniTimer")

    settings = load_settings()
    controller = TimerController(settings=settings)
    window = TimerWindow(controller)
    if settings.fullscreen:
        window.showFullScreen()
    else:
        window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
