"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Rewrite diagnostics carry
their context as `extra=` fields (`state_machine`, `step`, `integration`,
`outcome`), which end up under the "extra" key of each JSON line:

    {"level": "WARNING", "message": "Existing step wiring prevents ...",
     "extra": {"state_machine": "orders", "step": "Charge", "outcome": "custom_payload_path"}}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

_RESERVED_LOG_RECORD_ATTRS: set[str] = set(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"asctime", "message", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object.

    Non-standard record attributes (the `extra=` fields such as `state_machine`
    and `outcome`) are grouped under "extra"; values that are not JSON types are
    rendered with `str`.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Configure root logging with structured JSON output on stderr.

    stdout is kept for command output (including templates written with `--output -`).
    """

    root = logging.getLogger()

    # Re-configuring must not stack handlers.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())
