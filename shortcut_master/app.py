"""Application entry point and setup for Shortcut Master."""

import logging
import sys

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from shortcut_master.core.catalog import TaskCatalog
from shortcut_master.core.settings import GameSettings, load_config
from shortcut_master.ui.input_adapter import detect_os
from shortcut_master.ui.main_window import MainWindow


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Load the catalog and config, then start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("Shortcut Master")
    app.setApplicationDisplayName("Shortcut Master")

    catalog = TaskCatalog()
    settings, timings = load_config(defaults=GameSettings(os=detect_os()))

    window = MainWindow(catalog=catalog, settings=settings, timings=timings)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.move(geometry.center() - window.rect().center())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
