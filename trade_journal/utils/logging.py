"""Process-wide logging setup."""

import logging

from trade_journal.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str | None = None):
    """Configure the root logger once. Later calls only adjust the level."""
    global _configured

    resolved = (level or settings.log_level).upper()
    root = logging.getLogger()
    if not _configured:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        # SQL echo is noisy at INFO
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        _configured = True
    root.setLevel(resolved)
