"""
Local tracking of managed resources.

Maps resource addresses (``<type>.<name>``) to the remote id and the last
known declared/observed attributes. Everything lives in one JSON file:

    {
      "schema_version": 1,
      "resources": {
        "signalfx_alert_muting_rule.maintenance": {
          "type": "signalfx_alert_muting_rule",
          "id": "Ex1abc",
          "attributes": {...}
        }
      }
    }

Writes go through a temp file and ``os.replace`` under a lock file, so a
crash never leaves a half-written state file behind.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, IO, List, Optional

from pydantic import ValidationError

from sfxprovider.resources import ResourceData, get_resource

logger = logging.getLogger(__name__)


# Advisory lock on a sidecar "<state>.lock" file
if sys.platform == "win32":
    import msvcrt

    def _acquire(handle: IO, exclusive: bool) -> None:
        mode = msvcrt.LK_NBLCK if exclusive else msvcrt.LK_NBRLCK
        msvcrt.locking(handle.fileno(), mode, 1)

    def _release(handle: IO) -> None:
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
else:
    import fcntl

    def _acquire(handle: IO, exclusive: bool) -> None:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)

    def _release(handle: IO) -> None:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


@contextlib.contextmanager
def state_lock(state_path: Path, exclusive: bool = True) -> Generator[None, None, None]:
    """Hold the state file's lock for the duration of the block.

    Readers take a shared lock, writers an exclusive one.
    """
    lock_path = state_path.with_name(state_path.name + ".lock")
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path, "a+") as handle:
        _acquire(handle, exclusive)
        try:
            yield
        finally:
            _release(handle)


# Increment when making breaking changes to the file layout
SCHEMA_VERSION = 1


class StateError(Exception):
    """Raised when the state file cannot be read."""


class StateStore:
    """
    JSON-file store of tracked resources.

    Example:
        store = StateStore("./sfx-state.json")
        store.put("signalfx_alert_muting_rule.maintenance", "signalfx_alert_muting_rule", data)
        data = store.get("signalfx_alert_muting_rule.maintenance")
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"schema_version": SCHEMA_VERSION, "resources": {}}
        with state_lock(self.path, exclusive=False):
            try:
                with open(self.path, encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise StateError(f"Corrupted state file {self.path}: {e}") from e

        version = data.get("schema_version", SCHEMA_VERSION)
        if version > SCHEMA_VERSION:
            raise StateError(
                f"State file {self.path} has schema v{version}, "
                f"this version supports up to v{SCHEMA_VERSION}"
            )
        data.setdefault("resources", {})
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        data["schema_version"] = SCHEMA_VERSION
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with state_lock(self.path, exclusive=True):
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp, self.path)
            except BaseException:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp)
                raise
        logger.debug(f"Saved state to {self.path}")

    def addresses(self) -> List[str]:
        """Tracked resource addresses, sorted."""
        return sorted(self._load()["resources"])

    def resource_type(self, address: str) -> Optional[str]:
        entry = self._load()["resources"].get(address)
        return entry["type"] if entry else None

    def get(self, address: str) -> Optional[ResourceData]:
        """Load tracked data for an address, or None if untracked."""
        entry = self._load()["resources"].get(address)
        if entry is None:
            return None

        handler = get_resource(entry["type"])
        attributes = entry.get("attributes")
        try:
            state = handler.state_model.model_validate(attributes) if attributes else None
        except ValidationError as e:
            raise StateError(f"Invalid attributes for {address} in {self.path}: {e}") from e
        return ResourceData(id=entry.get("id", ""), state=state)

    def put(self, address: str, resource_type: str, data: ResourceData) -> None:
        """Track ``data`` under ``address``, replacing any previous entry."""
        stored = self._load()
        stored["resources"][address] = {
            "type": resource_type,
            "id": data.id,
            "attributes": data.state.model_dump(mode="json") if data.state else None,
        }
        self._save(stored)

    def remove(self, address: str) -> bool:
        """Stop tracking an address. Returns False if it was not tracked."""
        stored = self._load()
        if stored["resources"].pop(address, None) is None:
            return False
        self._save(stored)
        return True

    def export(self) -> Dict[str, Any]:
        """Raw state content, for display."""
        return self._load()["resources"]
