"""Entry point for the stregsystem-tui Textual app."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_log_dir

from stregsystem_tui.backend import BackendClient, ParkingClient
from stregsystem_tui.config import LOG_FILENAME, LOG_LEVEL_ENV, SETTINGS_APP_NAME
from stregsystem_tui.controller import KeyController
from stregsystem_tui.orchestrator import ActionOrchestrator
from stregsystem_tui.settings import SettingsStore, load_settings_or_default
from stregsystem_tui.state import AppState
from stregsystem_tui.tui import StregsystemApp


def configure_logging() -> Path:
    """Log to a file; the terminal belongs to the UI."""
    log_dir = Path(user_log_dir(SETTINGS_APP_NAME))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME
    logging.basicConfig(
        filename=log_path,
        level=os.environ.get(LOG_LEVEL_ENV, "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    return log_path


def main() -> None:
    """Run the Textual application."""
    log_path = configure_logging()
    logger = logging.getLogger(__name__)
    logger.info("app_start log_path=%s", log_path)

    store = SettingsStore()
    settings = load_settings_or_default(store)
    state = AppState(settings)

    backend = BackendClient(room_id=settings.room_id)
    parking = ParkingClient()
    controller = KeyController(ActionOrchestrator(backend, parking), store)
    StregsystemApp(state, controller, backend, parking).run()
    logger.info("app_exit")


if __name__ == "__main__":
    main()
