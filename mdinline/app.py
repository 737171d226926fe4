from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from PyQt6.QtCore import QCoreApplication, Qt
from PyQt6.QtWidgets import QApplication

from mdinline.di.container import Container
from mdinline.services.config.app_config import build_app_config
from mdinline.utils.constants import APP_NAME, APP_ORG
from mdinline.utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def run_app(argv: Sequence[str]) -> int:
    """
    Bootstraps logging and Qt, composes the application via the DI container,
    and launches the main window.
    """
    config = build_app_config()
    configure_logging(config.log_level())
    logger.info("Starting %s %s (config: %s)", APP_NAME, config.get_version(), config.loaded_from)

    # Required before the app exists so the preview and export sandbox can use WebEngine
    QCoreApplication.setAttribute(Qt.ApplicationAttribute.AA_ShareOpenGLContexts)
    QApplication.setOrganizationName(APP_ORG)
    QApplication.setApplicationName(APP_NAME)
    app = QApplication(list(argv))

    container = Container.default(organization=APP_ORG, application=APP_NAME, config=config)

    # Optional file path to open passed as first CLI argument
    start_path = Path(argv[1]) if len(argv) > 1 else None

    win = container.build_main_window(start_path=start_path, app_title=APP_NAME)
    win.show()

    return app.exec()
