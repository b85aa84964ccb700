"""
Secure Logging Module
=====================

Logging helpers that keep key material out of log output.

Every module logs through ``logging.getLogger(__name__)``; applications
call ``configure_root_logger`` (or ``get_secure_logger`` for a single
logger) once at startup to attach the redacting filter.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Final, Optional, Pattern


_SENSITIVE_PATTERNS: Final[list[tuple[str, Pattern[str]]]] = [
    ("secret", re.compile(r'(?i)\b(secret|ikm|private[_-]?key)\s*[=:]\s*["\']?[^\s"\',]+["\']?')),
    ("key", re.compile(r'(?i)\bkey\s*[=:]\s*["\']?[^\s"\',]+["\']?')),
    # Hex encoded secrets (a 256-bit key or longer)
    ("hex_secret", re.compile(r'(?i)\b(?:0x)?[a-f0-9]{64,}\b')),
    # Base64 encoded secrets
    ("base64_secret", re.compile(r'[A-Za-z0-9+/]{40,}={0,2}')),
]

_REDACTED_TEXT: Final[str] = "[REDACTED]"

_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class SecureLogFilter(logging.Filter):
    """
    Log filter that redacts key material from messages and arguments.

    Records are always kept, only sanitized.
    """

    def __init__(self, name: str = "", additional_patterns: Optional[list[Pattern[str]]] = None) -> None:
        super().__init__(name)
        self._additional_patterns = additional_patterns or []

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg and isinstance(record.msg, str):
            record.msg = self._sanitize(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._sanitize(v) if isinstance(v, str) else v
                               for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._sanitize(arg) if isinstance(arg, str) else
                    _REDACTED_TEXT if isinstance(arg, (bytes, bytearray)) else arg
                    for arg in record.args
                )

        return True

    def _sanitize(self, text: str) -> str:
        result = text
        for name, pattern in _SENSITIVE_PATTERNS:
            result = pattern.sub(f"{name}={_REDACTED_TEXT}", result)
        for pattern in self._additional_patterns:
            result = pattern.sub(_REDACTED_TEXT, result)
        return result


def get_secure_logger(
    name: str,
    level: str = "INFO",
    enable_console: bool = True,
) -> logging.Logger:
    """
    Create a logger with automatic secret filtering.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Whether to output to stderr

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper()))

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        console_handler.addFilter(SecureLogFilter())
        logger.addHandler(console_handler)

    logger.propagate = False
    return logger


def configure_root_logger(level: str = "INFO", enable_console: bool = True) -> None:
    """
    Configure the root logger with secure defaults.

    Call once at application startup so every module logger inherits
    the redacting filter.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        console_handler.addFilter(SecureLogFilter())
        root_logger.addHandler(console_handler)
