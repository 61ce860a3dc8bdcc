"""
lotocore/utils/logger.py
Per-module loggers under the "lotocore" namespace, with Rich console output
and one shared rotating log file.

Env:
    LOG_LEVEL      : DEBUG / INFO / WARNING ... (default INFO)
    LOG_DIR        : directory for lotocore.log; empty string disables the file
    LOG_MAX_BYTES  : rotation size (default 10 MB), 5 backups kept
"""
import logging
import os
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler

ROOT_NAME = "lotocore"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_loggers: dict[str, logging.Logger] = {}
_file_handler: RotatingFileHandler | None = None


def _shared_file_handler(log_dir: str) -> RotatingFileHandler:
    """Every core module writes to the same file; rotation needs a single handler."""
    global _file_handler
    if _file_handler is None:
        os.makedirs(log_dir, exist_ok=True)
        _file_handler = RotatingFileHandler(
            os.path.join(log_dir, f"{ROOT_NAME}.log"),
            maxBytes=int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024))),
            backupCount=5,
            encoding="utf-8",
        )
        _file_handler.setLevel(logging.DEBUG)
        _file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return _file_handler


def get_logger(name: str = ROOT_NAME) -> logging.Logger:
    if name in _loggers:
        return _loggers[name]

    full_name = name if name == ROOT_NAME else f"{ROOT_NAME}.{name}"
    logger = logging.getLogger(full_name)
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))

    if not logger.handlers:
        console = RichHandler(rich_tracebacks=True, show_path=False)
        console.setLevel(logging.DEBUG)
        logger.addHandler(console)

        log_dir = os.getenv("LOG_DIR", "logs")
        if log_dir:
            logger.addHandler(_shared_file_handler(log_dir))

    _loggers[name] = logger
    return logger
