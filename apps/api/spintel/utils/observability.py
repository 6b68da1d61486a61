"""
Structured logging: one JSON object per line so request, query and error
events can be grepped and shipped as-is.
"""
import json
import logging
from typing import Any


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format="%(message)s")


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **fields: Any) -> None:
    """
    Emit a single-line JSON log. Drops None values; non-JSON values go through str().
    """
    payload: dict[str, Any] = {"event": event}
    for k, v in fields.items():
        if v is not None:
            payload[k] = v
    try:
        out = json.dumps(payload, default=str)
    except (TypeError, ValueError):
        out = json.dumps({"event": event, "error": "serialization_failed"})
    logger.log(level, out)
