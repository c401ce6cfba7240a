"""
Logging setup and structured lifecycle logging.

Modules log through ``logging.getLogger(__name__)``. ``configure_logging``
attaches a single stdout handler to the ``sfxprovider`` logger, either plain
text or one JSON object per line for log shippers.

Resource lifecycle events are logged by ``OperationLogger``:
- resource.created
- resource.updated
- resource.deleted
- resource.removed (tracked resource no longer exists remotely)
- resource.imported

Usage:
    from sfxprovider.logger import OperationLogger

    oplog = OperationLogger("signalfx_alert_muting_rule")
    oplog.log_payload("Create", payload)
    oplog.log_created(resource_id="Ex1abc")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel

_ROOT_LOGGER = "sfxprovider"
_operations_logger = logging.getLogger("sfxprovider.operations")


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if fields:
            entry.update(fields)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "info", fmt: str = "text") -> logging.Logger:
    """
    Attach a stdout handler to the package logger.

    Calling it again replaces the previous handler rather than stacking.

    Args:
        level: debug, info, warning or error
        fmt: "json" or "text"

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        if getattr(handler, "_sfxprovider", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler._sfxprovider = True  # type: ignore[attr-defined]
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger


class OperationLogger:
    """
    Structured logger for resource lifecycle events.

    Every entry carries ``event``, ``resource_type`` and ``resource_id`` so
    log queries can follow a single resource across runs.
    """

    def __init__(self, resource_type: str):
        self.resource_type = resource_type
        self._logger = _operations_logger

    def _emit(
        self,
        event: str,
        resource_id: Optional[str],
        level: int = logging.INFO,
        **extra_fields: Any,
    ) -> None:
        fields = {
            "event": event,
            "resource_type": self.resource_type,
            "resource_id": resource_id or "",
        }
        fields.update({k: v for k, v in extra_fields.items() if v is not None})
        self._logger.log(
            level,
            "%s %s %s",
            event,
            self.resource_type,
            resource_id or "-",
            extra={"fields": fields},
        )

    def log_payload(self, operation: str, payload: BaseModel | dict) -> None:
        """Dump an outgoing request body at debug level."""
        if not self._logger.isEnabledFor(logging.DEBUG):
            return
        if isinstance(payload, BaseModel):
            body = payload.model_dump(by_alias=True)
        else:
            body = payload
        self._logger.debug(
            "SignalFx: %s %s Payload: %s",
            operation,
            self.resource_type,
            json.dumps(body, default=str),
        )

    def log_created(self, resource_id: str) -> None:
        self._emit("resource.created", resource_id)

    def log_updated(self, resource_id: str, start_time_source: Optional[str] = None) -> None:
        self._emit("resource.updated", resource_id, start_time_source=start_time_source)

    def log_deleted(self, resource_id: str) -> None:
        self._emit("resource.deleted", resource_id)

    def log_removed(self, resource_id: str) -> None:
        """Tracked resource is gone remotely and was dropped from state."""
        self._emit("resource.removed", resource_id, level=logging.WARNING)

    def log_imported(self, resource_id: str) -> None:
        self._emit("resource.imported", resource_id)
