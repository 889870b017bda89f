"""Logging setup with structured extras appended to each record."""

import logging

from app.config import settings

CONTEXT_FIELDS = ("request_id", "booking_id", "status", "location_id")


class ContextFormatter(logging.Formatter):
    """Append known `extra=` fields to the message as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(
        ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s")
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)
