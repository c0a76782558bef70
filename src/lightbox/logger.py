"""Structured gallery events.

Events are single JSON objects written as the log message, so they pass
through whatever handlers `configure_logging` installed. A logger can be
bound to context (the gallery session, for instance) that every event
repeats.
"""

import json
import logging
from datetime import UTC, datetime
from typing import Any


class StructuredLogger:
    def __init__(self, name: str = "lightbox.events", context: dict[str, Any] | None = None):
        self._logger = logging.getLogger(name)
        self.context: dict[str, Any] = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **context: Any) -> "StructuredLogger":
        """Child logger whose events also carry `context`."""
        return StructuredLogger(self.name, {**self.context, **context})

    def log_event(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        """Emit one event, e.g. log_event("photo_submitted", photo_id=..., extra={...}).

        Keys of an `extra` dict are merged at top level. Event fields override bound context.
        """
        if not self._logger.isEnabledFor(level):
            return

        payload: dict[str, Any] = {"timestamp": datetime.now(UTC).isoformat(), "event": event, **self.context}
        for key, value in fields.items():
            if key == "extra" and isinstance(value, dict):
                payload.update(value)
            else:
                payload[key] = value

        self._logger.log(level, json.dumps(payload, default=str))


logger = StructuredLogger()

__all__ = ["logger", "StructuredLogger"]
