# src/config/logging_config.py

"""Per-run timestamped logging configuration for amazon_link_card.

Every launch (CLI, TUI or API server) writes a dedicated log file inside
``logs/`` named after the launch time (e.g. ``logs/card_20261019_153045.log``).
All ``link_card.*`` loggers share that file handler, so a failed fetch can
be traced from the endpoint down to the extractor tier that gave up.

The console handler stays at WARNING by default so that rendered markup
on stdout is never interleaved with chatter; ``verbose=True`` lowers it
to INFO.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "link_card"


def setup_logging(verbose: bool = False) -> Path:
    """Initialise the root ``link_card`` logger for the current run.

    Args:
        verbose: Lower the console handler from WARNING to INFO.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"card_{timestamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    console_level = logging.INFO if verbose else logging.WARNING

    # Repeated calls (tests, --serve reloads) only adjust the console level
    if root_logger.handlers:
        for handler in root_logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(console_level)
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file
