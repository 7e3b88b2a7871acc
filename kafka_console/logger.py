"""
Structured logging module for the Kafka console tool.

Log records always go to stderr: in consume mode stdout carries the records.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from kafka_console.config import ConsoleConfig


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, mode: str = "console"):
        """Initialize JSON formatter.

        Args:
            mode: Operation mode for logging context
        """
        super().__init__()
        self.mode = mode

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_entry = {
            "timestamp": _now(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "mode": self.mode,
        }

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter, extra fields appended as key=value."""

    def __init__(self, mode: str = "console"):
        super().__init__(
            fmt=f"%(asctime)s [{mode}] %(levelname)s %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        extra = getattr(record, "extra_fields", None)

        if extra:
            text += " " + " ".join(f"{k}={v}" for k, v in extra.items())

        return text


class ConsoleLogger:
    """Logger wrapper with structured logging support."""

    def __init__(self, config: ConsoleConfig):
        """Initialize console logger.

        Args:
            config: Console configuration
        """
        self.config = config
        self.logger = logging.getLogger("kafka_console")
        self._setup_logger()

        # Counters reported at the end of a run
        self.metrics = {
            "records_consumed": 0,
            "records_produced": 0,
            "records_skipped": 0,
            "delivery_errors": 0,
            "deserialization_errors": 0,
            "parse_errors": 0,
            "start_time": _now(),
        }

    def _setup_logger(self) -> None:
        """Configure the logger based on config."""
        level = getattr(logging, self.config.log_level.upper(), None)
        if not isinstance(level, int):
            level = logging.INFO

        self.logger.setLevel(level)
        self.logger.handlers.clear()
        self.logger.propagate = False

        if self.config.log_format == "json":
            formatter = JsonFormatter(self.config.mode)
        else:
            formatter = TextFormatter(self.config.mode)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if self.config.log_file:
            file_handler = logging.FileHandler(self.config.log_file)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _log_with_extra(self, level: int, message: str, **extra_fields: Any) -> None:
        """Log with extra structured fields."""
        if not self.logger.isEnabledFor(level):
            return

        record = self.logger.makeRecord(
            name=self.logger.name,
            level=level,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=None,
        )
        record.extra_fields = extra_fields
        self.logger.handle(record)

    def info(self, message: str, **extra: Any) -> None:
        """Log info message with optional extra fields."""
        self._log_with_extra(logging.INFO, message, **extra)

    def debug(self, message: str, **extra: Any) -> None:
        """Log debug message with optional extra fields."""
        self._log_with_extra(logging.DEBUG, message, **extra)

    def warning(self, message: str, **extra: Any) -> None:
        """Log warning message with optional extra fields."""
        self._log_with_extra(logging.WARNING, message, **extra)

    def error(self, message: str, **extra: Any) -> None:
        """Log error message with optional extra fields."""
        self._log_with_extra(logging.ERROR, message, **extra)

    def exception(self, message: str, **extra: Any) -> None:
        """Log exception with traceback."""
        self.logger.exception(message, extra={"extra_fields": extra})

    def record_consumed(self, count: int = 1) -> None:
        self.metrics["records_consumed"] += count

    def record_produced(self, count: int = 1) -> None:
        self.metrics["records_produced"] += count

    def record_skipped(self, count: int = 1) -> None:
        self.metrics["records_skipped"] += count

    def record_delivery_error(self) -> None:
        self.metrics["delivery_errors"] += 1

    def record_deserialization_error(self) -> None:
        self.metrics["deserialization_errors"] += 1

    def record_parse_error(self) -> None:
        self.metrics["parse_errors"] += 1

    def get_metrics(self) -> dict:
        """Get current metrics."""
        return {
            **self.metrics,
            "current_time": _now(),
        }

    def log_metrics(self) -> None:
        """Log current metrics."""
        self.info("Run metrics", **self.get_metrics())
