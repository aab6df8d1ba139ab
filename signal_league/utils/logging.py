"""Root logger setup shared by the CLI and the cron web app."""

import logging

from signal_league.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once; later calls only adjust the level."""
    level_name = (level or settings.log_level).upper()
    numeric = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(numeric)
        return

    logging.basicConfig(level=numeric, format=LOG_FORMAT)

    # SQL echo is handled by the engine flag, keep the driver quiet
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
