"""
Tests for span event emission around resource operations.
"""

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from sfxprovider.models import DashboardGroupState
from sfxprovider.otel import emit_operation
from sfxprovider.resources import ResourceData, get_resource


@pytest.fixture
def tracer_and_exporter():
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider.get_tracer("test"), exporter


class TestEmitOperation:

    def test_event_on_current_span(self, tracer_and_exporter):
        tracer, exporter = tracer_and_exporter
        with tracer.start_as_current_span("apply"):
            emit_operation("create", "signalfx_dashboard_group", "DA0001")

        span = exporter.get_finished_spans()[0]
        event = span.events[0]
        assert event.name == "sfx.resource.create"
        assert event.attributes["sfx.resource.type"] == "signalfx_dashboard_group"
        assert event.attributes["sfx.resource.id"] == "DA0001"

    def test_no_span_is_noop(self):
        emit_operation("delete", "signalfx_dashboard_group", "DA0001")

    def test_lifecycle_events_recorded(self, tracer_and_exporter, client_ctx):
        tracer, exporter = tracer_and_exporter
        handler = get_resource("signalfx_dashboard_group")

        with tracer.start_as_current_span("apply"):
            data = handler.create(client_ctx, ResourceData(state=DashboardGroupState(name="Team")))
            handler.read(client_ctx, data)
            handler.delete(client_ctx, data)

        names = [e.name for e in exporter.get_finished_spans()[0].events]
        assert names == ["sfx.resource.create", "sfx.resource.read", "sfx.resource.delete"]
