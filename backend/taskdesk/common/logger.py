from __future__ import annotations

import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging import Logger, LogRecord
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from taskdesk.config import get_settings

# ContextVar for Request ID
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
source_ctx: ContextVar[dict[str, str] | None] = ContextVar("source_ctx", default=None)

_cache: dict[str, Logger] = {}

# ANSI Colors
class Colors:
    RESET = "\033[0m"
    CYAN = "\033[36m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BOLD_RED = "\033[1;31m"

class SensitiveDataFilter(logging.Filter):
    """Masks user home directories in logged storage paths."""

    PATTERNS = [
        (r'(/home/|/Users/|\\Users\\)[^/\\\s"]+', r'\1~'),
    ]

    def filter(self, record: LogRecord) -> bool:
        if isinstance(record.msg, str):
            for pattern, replacement in self.PATTERNS:
                record.msg = re.sub(pattern, replacement, record.msg, flags=re.IGNORECASE)
        return True

def _source(record: LogRecord) -> list[str]:
    source_data = source_ctx.get() or {}
    module = source_data.get("module") or record.name
    endpoint = source_data.get("endpoint") or getattr(record, "endpoint", "")
    method = source_data.get("method") or getattr(record, "method", "")

    parts = [f"module:{module}"]
    if endpoint:
        parts.append(f"endpoint:{endpoint}")
    if method:
        parts.append(f"method:{method}")
    return parts

class JSONFormatter(logging.Formatter):
    """
    Standardized JSON log format.
    Fields: timestamp, severity, source, requestId, content, environment.
    """
    def format(self, record: LogRecord) -> str:
        settings = get_settings()

        msg = record.getMessage()
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            msg += f"\nStack Trace:\n{record.exc_text}"

        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "severity": record.levelname,
            "source": f"[{' | '.join(_source(record))}]",
            "requestId": request_id_ctx.get() or "N/A",
            "content": msg,
            "environment": settings.env
        }

        return json.dumps(log_entry)

class ColorFormatter(logging.Formatter):
    """
    Console log formatter with colors.
    """
    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD_RED
    }

    def format(self, record: LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.RESET)
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        msg = record.getMessage()
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            msg += f"\n{record.exc_text}"

        source_str = f"[{' | '.join(_source(record))}]"
        return f"{color}[{timestamp}] [{record.levelname}] {source_str} {msg}{Colors.RESET}"

LOG_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
    'critical': logging.CRITICAL
}

def get_logger(name: str) -> Logger:
    if name in _cache:
        return _cache[name]

    settings = get_settings()
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG) # Handlers decide what to output
    logger.propagate = False

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_level = LOG_LEVELS.get(settings.log_level.lower(), logging.INFO)
        if settings.debug:
            console_level = logging.DEBUG
        console_handler.setLevel(console_level)
        console_handler.setFormatter(ColorFormatter())
        console_handler.addFilter(SensitiveDataFilter())
        logger.addHandler(console_handler)

        log_dir = Path(settings.log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)

            # Daily rotation, keep 7 days
            file_handler = TimedRotatingFileHandler(
                filename=log_dir / "backend.log",
                when="midnight",
                interval=1,
                backupCount=7,
                encoding="utf-8"
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(JSONFormatter())
            file_handler.addFilter(SensitiveDataFilter())
            logger.addHandler(file_handler)

        except OSError as e:
            # Console logging still works without the file
            sys.stderr.write(f"Failed to setup file logging: {e}\n")

    _cache[name] = logger
    return logger
