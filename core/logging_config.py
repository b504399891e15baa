"""Structured logging configuration for better log analysis."""

import json
import logging
import logging.handlers
from datetime import UTC, datetime
from pathlib import Path

# Optional fields callers attach with ``extra=``
EXTRA_FIELDS = ("offset", "outcome", "command", "user_id")


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Formats log records as JSON for easier parsing with tools like jq, grep,
    or log aggregators. Useful for production environments where logs need
    to be analyzed programmatically.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON-formatted log string.
        """
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for name in EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        return json.dumps(log_data, default=str)


def setup_logging(log_file: Path, level: int = logging.INFO) -> None:
    """Configure the root logger.

    Console output stays human-readable; the rotating log file gets one
    JSON object per line.

    Args:
        log_file: Path of the JSON log file.
        level: Minimum level for both handlers.
    """
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    file_handler = logging.handlers.RotatingFileHandler(
        str(log_file),
        maxBytes=10_000_000,  # 10MB
        backupCount=5,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(StructuredFormatter())

    logging.basicConfig(
        level=level,
        handlers=[console_handler, file_handler],
        force=True,
    )
