"""
Centralized logging configuration for the Accio backend.

Console output is human-readable and colored; the log file receives one JSON
object per line and rotates at 10 MB. Structured context is passed through
``extra={"extra_fields": {...}}`` and merged into the JSON record.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

SENSITIVE_KEYS = ['password', 'token', 'secret', 'authorization', 'api_key', 'api-key']


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so the file handler still sees the plain level name
        record = logging.makeLogRecord(record.__dict__)
        level_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        record.levelname = f"{level_color}{record.levelname:8s}{self.COLORS['RESET']}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """Formatter emitting structured JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            log_data.update(filter_sensitive_data(extra_fields))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(config: Any) -> None:
    """
    Configure the root logger from application settings.

    Args:
        config: Settings object carrying the ``log_*`` fields
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    if config.log_console_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        root_logger.addHandler(console_handler)

    if config.log_file_enabled:
        log_path = Path(config.log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=str(log_path),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setLevel(log_level)

        if config.log_json_format:
            file_formatter = JSONFormatter()
        else:
            file_formatter = logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s:%(funcName)s:%(lineno)d | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # Third-party noise
    for noisy in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    root_logger.info(
        f"Logging initialized: level={config.log_level.upper()}, "
        f"console={config.log_console_enabled}, "
        f"file={config.log_file_enabled}"
    )


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that attaches fixed context to every record.

    Usage:
        log = ContextLoggerAdapter(logger, {"session_id": sid})
        log.info("Turn committed")
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.setdefault('extra', {})
        extra['extra_fields'] = {**self.extra, **extra.get('extra_fields', {})}
        return msg, kwargs


def filter_sensitive_data(data: Any, sensitive_keys: Optional[list] = None) -> Any:
    """
    Mask values whose key looks like a credential.

    Args:
        data: dict, list or primitive to filter
        sensitive_keys: key fragments to mask (defaults to SENSITIVE_KEYS)

    Returns:
        A filtered copy with sensitive values replaced by "***FILTERED***"
    """
    if sensitive_keys is None:
        sensitive_keys = SENSITIVE_KEYS

    if isinstance(data, dict):
        return {
            key: "***FILTERED***" if any(s in str(key).lower() for s in sensitive_keys)
            else filter_sensitive_data(value, sensitive_keys)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [filter_sensitive_data(item, sensitive_keys) for item in data]
    return data


def truncate_large_data(data: str, max_length: int = 5000) -> str:
    """Cap a string for logging, noting the original length."""
    if len(data) <= max_length:
        return data
    return data[:max_length] + f"... (truncated, total length: {len(data)})"
