"""
Logging setup
Coloured console output plus a daily application log and a separate error log
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that are too chatty at INFO
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "apscheduler", "httpx")


class ColoredFormatter(logging.Formatter):
    """ANSI-coloured level names for terminals"""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record):
        # File handlers see the same record, so colour a copy
        colored = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(log_level: str = "INFO", log_dir: str = "logs"):
    """
    Configure the root logger; safe to call more than once

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_dir: created if missing; holds gympro_<date>.log and gympro_error_<date>.log
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG)
    console.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT))
    root_logger.addHandler(console)

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    today = datetime.now().strftime("%Y-%m-%d")
    root_logger.addHandler(_file_handler(log_path / f"gympro_{today}.log", logging.INFO))
    root_logger.addHandler(_file_handler(log_path / f"gympro_error_{today}.log", logging.ERROR))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"📋 Logging initialised at {log_level.upper()} (files in {log_path})")


def get_logger(name: str) -> logging.Logger:
    """
    Usage:
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
