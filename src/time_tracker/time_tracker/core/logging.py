from __future__ import annotations

import logging
import sys


class KeyValueFormatter(logging.Formatter):
    """One line per record: ``ts level logger message key=value ...``."""

    EXTRA_KEYS = ("employee_id", "session_id", "path", "method", "status_code")

    def format(self, record: logging.LogRecord) -> str:
        line = f"{self.formatTime(record)} {record.levelname} {record.name} {record.getMessage()}"

        extras = [f"{key}={getattr(record, key)}" for key in self.EXTRA_KEYS if hasattr(record, key)]
        if extras:
            line = f"{line} {' '.join(extras)}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(KeyValueFormatter())
    logging.basicConfig(
        level=level.upper(),
        handlers=[handler],
        force=True,
    )
