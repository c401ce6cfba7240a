"""
Pydantic models for SignalFx API entities and declared resource state.

Two families live here:

- Wire models mirror the JSON the SignalFx REST API sends and receives
  (camelCase aliases, times in milliseconds).
- State models hold the declared/observed attributes of a managed resource
  (snake_case, times in seconds).

Conversion between the two families is the job of ``sfxprovider.reconcile``.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class AlertMutingRuleFilter(BaseModel):
    """A single filter condition as the API represents it."""

    model_config = ConfigDict(populate_by_name=True)

    property: str
    property_value: str = Field(..., alias="propertyValue")
    not_: bool = Field(False, alias="NOT")


class CreateUpdateAlertMutingRuleRequest(BaseModel):
    """Body for creating or updating an alert muting rule."""

    model_config = ConfigDict(populate_by_name=True)

    description: str
    filters: List[AlertMutingRuleFilter] = Field(default_factory=list)
    start_time: int = Field(..., alias="startTime", description="Milliseconds since epoch")
    stop_time: int = Field(
        0, alias="stopTime", description="Milliseconds since epoch, 0 means no stop"
    )


class AlertMutingRule(BaseModel):
    """An alert muting rule as returned by the API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    description: str = ""
    filters: Optional[List[AlertMutingRuleFilter]] = None
    start_time: int = Field(0, alias="startTime")
    stop_time: int = Field(0, alias="stopTime")
    created: Optional[int] = None
    creator: Optional[str] = None
    last_updated: Optional[int] = Field(None, alias="lastUpdated")
    last_updated_by: Optional[str] = Field(None, alias="lastUpdatedBy")


class DashboardGroup(BaseModel):
    """A dashboard group as returned by the API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    description: str = ""
    dashboards: List[str] = Field(default_factory=list)
    teams: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Declared state models
# ---------------------------------------------------------------------------


class MutingFilter(BaseModel):
    """Declared muting filter. Frozen so it can be a set member."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    property: str
    property_value: str
    negated: bool = False


class AlertMutingRuleState(BaseModel):
    """Declared and observed attributes of ``signalfx_alert_muting_rule``.

    ``start_time`` and ``stop_time`` are Unix seconds. ``effective_start_time``
    is observed only: it holds the remote ``startTime`` in milliseconds and is
    never sent back as a declared value.
    """

    model_config = ConfigDict(extra="forbid")

    description: str
    detectors: List[str] = Field(default_factory=list)
    filter: set[MutingFilter]
    start_time: int = Field(..., ge=0, description="Unix seconds, changing it forces recreation")
    stop_time: int = Field(0, ge=0, description="Unix seconds, 0 means no stop")
    effective_start_time: Optional[int] = None

    @field_serializer("filter")
    def _sorted_filters(self, value: set[MutingFilter]) -> list[dict]:
        ordered = sorted(value, key=lambda f: (f.property, f.property_value, f.negated))
        return [f.model_dump() for f in ordered]


class DashboardGroupState(BaseModel):
    """Declared attributes of ``signalfx_dashboard_group``."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    description: str = ""
