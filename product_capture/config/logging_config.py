# product_capture/config/logging_config.py

"""Per-run logging for product_capture.

Every launch writes ``logs/run_<YYYYMMDD_HHMMSS>.log``. Strategy
attempts, rate lookups and API requests of a run all land in that one
file, while the terminal only shows warnings unless asked for more.
Callers of the capture endpoint only ever see the generic failure
message; the per-strategy reasons are in this log.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from product_capture.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Flask's dev server logs each request here
_REQUEST_LOGGER = "werkzeug"


def _run_log_path(logs_dir: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"run_{stamp}.log"


def _file_handler(path: Path) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def _console_handler(level: int | str) -> logging.StreamHandler:  # type: ignore[type-arg]
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )
    return handler


def setup_logging(console_level: int | str | None = None) -> Path:
    """Attach the run-file and stderr handlers to ``product_capture``.

    Args:
        console_level: Threshold for stderr output. Defaults to
            ``Settings.CONSOLE_LOG_LEVEL``.

    Returns:
        Path of this run's log file. When handlers are already attached
        (tests, a reloading server) they are kept and only the path
        that would have been used is returned.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = _run_log_path(logs_dir)

    project_logger = logging.getLogger("product_capture")
    project_logger.setLevel(logging.DEBUG)
    if project_logger.handlers:
        return log_file

    file_handler = _file_handler(log_file)
    project_logger.addHandler(file_handler)
    project_logger.addHandler(
        _console_handler(console_level or Settings.CONSOLE_LOG_LEVEL)
    )

    request_logger = logging.getLogger(_REQUEST_LOGGER)
    request_logger.setLevel(logging.INFO)
    request_logger.addHandler(file_handler)

    project_logger.info("Logging initialised, log file: %s", log_file)
    return log_file
