"""
Logging Configuration
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Any, Mapping

from lawlens.config.settings import settings


class SensitiveFieldFilter(logging.Filter):
    """
    Redact credentials that end up in mapping-style log arguments.
    Values under the keys below are replaced with a placeholder.
    """

    SENSITIVE_KEYS = {"password", "password_hash", "token", "admin_token", "cookie", "authorization", "secret"}

    def _redact_obj(self, obj: Any):
        if isinstance(obj, Mapping):
            return {
                k: ("<redacted>" if str(k).lower() in self.SENSITIVE_KEYS else self._redact_obj(v))
                for k, v in obj.items()
            }
        if isinstance(obj, (list, tuple)):
            return type(obj)(self._redact_obj(x) for x in obj)
        return obj

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, Mapping):
            record.msg = self._redact_obj(record.msg)
        if isinstance(record.args, Mapping):
            record.args = self._redact_obj(record.args)
        elif isinstance(record.args, tuple) and record.args:
            record.args = tuple(self._redact_obj(a) for a in record.args)
        return True


def _tune_external_loggers():
    # Keep third-party request/response chatter out of the application log
    for name in ("urllib3", "httpx", "httpcore", "openai", "stripe"):
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_format: Optional[str] = None
):
    """
    Configure the root logger

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: optional log file path
        log_format: logging format string
    """
    level = log_level or settings.LOG_LEVEL
    log_path = log_file or settings.LOG_FILE
    fmt = log_format or settings.LOG_FORMAT

    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    numeric_level = level_map.get(level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = []

    sensitive_filter = SensitiveFieldFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(fmt))
    console_handler.addFilter(sensitive_filter)
    root_logger.addHandler(console_handler)

    if log_path:
        try:
            log_file_path = Path(log_path)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path, encoding='utf-8')
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(logging.Formatter(fmt))
            file_handler.addFilter(sensitive_filter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Cannot create log file {log_path}: {e}")

    logging.getLogger('uvicorn').setLevel(logging.INFO)
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('fastapi').setLevel(logging.INFO)
    logging.getLogger('sqlalchemy').setLevel(logging.WARNING)
    logging.getLogger('celery').setLevel(logging.INFO)

    _tune_external_loggers()


setup_logging()

logger = logging.getLogger('lawlens')
