"""
OTel span event emission for resource operations.

Operations record an event on whatever span is current in the caller
(for example a CI pipeline span wrapping an ``apply``). Nothing is
recorded when no span is active.

Usage::

    from sfxprovider.otel import emit_operation

    emit_operation("create", "signalfx_alert_muting_rule", rule_id)
"""

from __future__ import annotations

from opentelemetry import trace as otel_trace


def add_span_event(
    name: str, attributes: dict[str, str | int | float | bool]
) -> None:
    """Add an event to the current OTel span if it is recording."""
    span = otel_trace.get_current_span()
    if span and span.is_recording():
        span.add_event(name=name, attributes=attributes)


def emit_operation(operation: str, resource_type: str, resource_id: str) -> None:
    """Emit ``sfx.resource.<operation>`` for a completed resource operation.

    Event name: ``sfx.resource.<operation>``
    """
    add_span_event(
        f"sfx.resource.{operation}",
        {
            "sfx.resource.type": resource_type,
            "sfx.resource.id": resource_id,
        },
    )
