"""
Base resource contract and registry.

Defines the lifecycle every managed resource type implements:
create, read, update, delete, exists and import.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from sfxprovider.client import ClientContext
from sfxprovider.errors import NotFoundError
from sfxprovider.logger import OperationLogger

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT", bound=BaseModel)


@dataclass(frozen=True)
class ResourceData(Generic[StateT]):
    """
    A tracked resource as handed to lifecycle operations.

    ``id`` is the remote identifier; an empty string means the resource is
    not tracked (never created, or removed after a not-found read).
    ``state`` is ``None`` only right after a pass-through import.
    """

    id: str = ""
    state: Optional[StateT] = None

    @property
    def tracked(self) -> bool:
        return bool(self.id)


class Resource(ABC, Generic[StateT]):
    """
    Abstract base class for resource handlers.

    Operations never mutate the ``ResourceData`` they are given; they return
    a new one. A failed API call therefore leaves the caller's prior state
    authoritative.
    """

    type_name: str = ""
    state_model: Type[BaseModel] = BaseModel

    def __init__(self) -> None:
        self.oplog = OperationLogger(self.type_name)

    @abstractmethod
    def create(self, ctx: ClientContext, data: ResourceData[StateT]) -> ResourceData[StateT]:
        """Create the remote entity from declared state."""

    @abstractmethod
    def read(self, ctx: ClientContext, data: ResourceData[StateT]) -> ResourceData[StateT]:
        """Refresh state from the remote entity.

        Returns untracked data (empty id) when the entity no longer exists.
        """

    @abstractmethod
    def update(self, ctx: ClientContext, data: ResourceData[StateT]) -> ResourceData[StateT]:
        """Push declared state to the existing remote entity."""

    @abstractmethod
    def delete(self, ctx: ClientContext, data: ResourceData[StateT]) -> None:
        """Delete the remote entity."""

    @abstractmethod
    def fetch(self, ctx: ClientContext, resource_id: str) -> BaseModel:
        """Fetch the raw remote entity."""

    def exists(self, ctx: ClientContext, data: ResourceData[StateT]) -> bool:
        """Check whether the remote entity exists.

        Not-found is answered with False; any other error propagates.
        """
        try:
            self.fetch(ctx, data.id)
        except NotFoundError:
            return False
        return True

    def import_state(self, resource_id: str) -> ResourceData[StateT]:
        """Pass-through import: track the id, state is filled by the next read."""
        self.oplog.log_imported(resource_id)
        return ResourceData(id=resource_id)

    def requires_replacement(self, old: StateT, new: StateT) -> bool:
        """Whether moving from ``old`` to ``new`` forces recreation."""
        return False

    def prepare_update(self, tracked: ResourceData[StateT], declared: StateT) -> ResourceData[StateT]:
        """Combine newly declared state with what is tracked for an update."""
        return ResourceData(id=tracked.id, state=declared)


# Resource handler registry
_RESOURCES: Dict[str, Type[Resource]] = {}


def register_resource(type_name: str):
    """Decorator to register a resource handler under its type name."""
    def decorator(cls: Type[Resource]) -> Type[Resource]:
        cls.type_name = type_name
        _RESOURCES[type_name] = cls
        return cls
    return decorator


def get_resource(type_name: str) -> Resource:
    """
    Get a handler instance for a resource type.

    Raises:
        ValueError: If the type is not registered
    """
    # Import handlers to register them
    from sfxprovider.resources import alert_muting_rule, dashboard_group  # noqa: F401

    if type_name not in _RESOURCES:
        raise ValueError(
            f"Unknown resource type: {type_name}. "
            f"Must be one of: {sorted(_RESOURCES)}"
        )
    return _RESOURCES[type_name]()


def resource_types() -> list[str]:
    """List registered resource type names."""
    from sfxprovider.resources import alert_muting_rule, dashboard_group  # noqa: F401

    return sorted(_RESOURCES)
