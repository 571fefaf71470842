"""
Process-wide logging setup shared by the CLI and the web server.

One console handler plus a size-rotated file under <log_dir>/leaguedesk.log.
Library modules only ever call logging.getLogger(__name__).
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from leaguedesk.config import LoggingConfig

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
LOG_FILENAME = "leaguedesk.log"


def configure_logging(cfg: LoggingConfig, *, console: bool = True) -> logging.Logger:
    """Install handlers on the root logger and return the app logger."""
    log_file = Path(cfg.log_dir) / LOG_FILENAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handlers: list[logging.Handler] = [
        logging.handlers.RotatingFileHandler(
            log_file, maxBytes=2 * 1024 * 1024, backupCount=3,  # 2 MB × 3 files
            encoding="utf-8",
        ),
    ]
    if console:
        handlers.insert(0, logging.StreamHandler())

    logging.basicConfig(
        level=logging.getLevelName(cfg.level),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger("leaguedesk")
