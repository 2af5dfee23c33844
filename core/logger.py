import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

from core.config import settings

LOGS_DIR = Path(settings.LOG_DIR)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Colour the level name for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',  # cyan
        'INFO': '\033[32m',  # green
        'WARNING': '\033[33m',  # yellow
        'ERROR': '\033[31m',  # red
        'CRITICAL': '\033[35m',  # magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # the record is shared with the file handler
        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(colored.levelname)
        if color:
            colored.levelname = f"{color}{colored.levelname}{self.RESET}"
        return super().format(colored)


def _console_handler(level) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(log_file: str, level, max_bytes: int, backup_count: int) -> logging.Handler:
    handler = RotatingFileHandler(
        LOGS_DIR / log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logger(
        name: str,
        log_file: str = None,
        level: int = None,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5
) -> logging.Logger:
    """
    Console logger, plus a rotating file under LOG_DIR when log_file is given.

    Args:
        name: logger name
        log_file: file name inside LOG_DIR
        level: defaults to the configured LOG_LEVEL
        max_bytes: rotate the file at this size
        backup_count: rotated files kept
    """
    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(_console_handler(level))
    if log_file:
        logger.addHandler(_file_handler(log_file, level, max_bytes, backup_count))
    return logger


def _dump(data) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2, default=str)


class DatabaseLogger:
    """Persistence events: row writes, reference list changes, store failures."""

    def __init__(self, logger_name: str = "database"):
        self.logger = setup_logger(
            name=logger_name,
            log_file=f"{logger_name}.log"
        )

    def log_create(self, model_name: str, data: dict):
        self.logger.info(f"CREATE {model_name}:\n{_dump(data)}")

    def log_update(self, model_name: str, record_id, changes: dict):
        self.logger.info(f"UPDATE {model_name} (id={record_id}):\n{_dump(changes)}")

    def log_delete(self, model_name: str, record_id):
        self.logger.warning(f"DELETE {model_name} (id={record_id})")

    def log_reference(self, action: str, garden_id, kind, ref_id):
        """One entry added to or dropped from a garden list."""
        kind = getattr(kind, "value", kind)
        self.logger.debug(f"REF {action} garden={garden_id} {kind}={ref_id}")

    def log_denied(self, operation: str, user_id, garden_id):
        self.logger.warning(f"DENIED {operation}: user={user_id} garden={garden_id}")

    def log_error(self, operation: str, error: Exception):
        self.logger.error(
            f"STORE FAILURE in {operation}: {type(error).__name__}: {error}\n"
            f"{traceback.format_exc()}"
        )


db_logger = DatabaseLogger()
app_logger = setup_logger("app", "app.log")
