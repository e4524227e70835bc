"""Payload-safe logging utilities.

Requests to this service carry whole page images as base64 strings and
form content as annotation text. Neither belongs in a log line, so the
formatter collapses base64 runs and callers log counts, never text.
"""

import logging
import re
import sys
from typing import Any

from pdf2imagefill.config import get_settings

# Anything this long drawn from the base64 alphabet is treated as a payload
BASE64_RUN = re.compile(r"(?:data:[\w/+.-]+;base64,)?[A-Za-z0-9+/]{200,}={0,2}")


class PayloadSafeFormatter(logging.Formatter):
    """Formatter that replaces embedded base64 payloads with their length."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        redact_payloads: bool = True,
    ):
        super().__init__(fmt, datefmt)
        self.redact_payloads = redact_payloads

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, collapsing payloads if enabled."""
        message = super().format(record)

        if self.redact_payloads:
            message = self._redact(message)

        return message

    @staticmethod
    def _redact(text: str) -> str:
        return BASE64_RUN.sub(lambda m: f"[base64:{len(m.group(0))} chars]", text)


class PayloadSafeLogger:
    """Logger wrapper that accepts keyword context.

    Usage:
        logger = get_logger(__name__)
        logger.info("Rasterized PDF", page_count=3, scale=2.0)
        logger.error("Assembly failed", error=str(e))

    Payload safety:
        - Never log annotation text or image bytes
        - Log counts, page numbers and sizes instead
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)
        self._setup_handler()

    def _setup_handler(self) -> None:
        """Set up the log handler with payload-safe formatting."""
        if not self._logger.handlers:
            settings = get_settings()

            handler = logging.StreamHandler(sys.stdout)
            handler.setLevel(settings.log_level)

            # Use JSON-like format for production, readable format for dev
            if settings.is_production:
                fmt = '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
            else:
                fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

            handler.setFormatter(PayloadSafeFormatter(fmt))
            self._logger.addHandler(handler)
            self._logger.setLevel(settings.log_level)

    def _format_kwargs(self, kwargs: dict[str, Any]) -> str:
        """Format keyword arguments for logging."""
        if not kwargs:
            return ""
        return " | " + " ".join(f"{k}={v}" for k, v in kwargs.items())

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(f"{message}{self._format_kwargs(kwargs)}")

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(f"{message}{self._format_kwargs(kwargs)}")

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(f"{message}{self._format_kwargs(kwargs)}")

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(f"{message}{self._format_kwargs(kwargs)}")

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._logger.exception(f"{message}{self._format_kwargs(kwargs)}")


def get_logger(name: str) -> PayloadSafeLogger:
    """Get a payload-safe logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        PayloadSafeLogger instance

    Example:
        logger = get_logger(__name__)
        logger.info("Assembled PDF", page_count=5, dropped_annotations=0)
    """
    return PayloadSafeLogger(name)
