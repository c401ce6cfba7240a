"""
Tests for logging setup and OperationLogger.
"""

import json
import logging
from io import StringIO

import pytest

from sfxprovider.logger import JsonFormatter, OperationLogger, configure_logging
from sfxprovider.models import CreateUpdateAlertMutingRuleRequest


@pytest.fixture
def captured_logs():
    """Route the operations logger to a JSON handler over a buffer."""
    output = StringIO()
    ops_logger = logging.getLogger("sfxprovider.operations")
    handler = logging.StreamHandler(output)
    handler.setFormatter(JsonFormatter())
    ops_logger.addHandler(handler)
    ops_logger.setLevel(logging.DEBUG)
    yield output
    ops_logger.removeHandler(handler)
    ops_logger.setLevel(logging.NOTSET)


def parse_log_lines(captured_logs) -> list:
    captured_logs.seek(0)
    return [json.loads(line) for line in captured_logs.read().splitlines() if line]


class TestOperationLogger:

    def test_created_event(self, captured_logs):
        OperationLogger("signalfx_alert_muting_rule").log_created("AL0001")

        log = parse_log_lines(captured_logs)[-1]
        assert log["event"] == "resource.created"
        assert log["resource_type"] == "signalfx_alert_muting_rule"
        assert log["resource_id"] == "AL0001"
        assert log["level"] == "info"

    def test_removed_is_warning(self, captured_logs):
        OperationLogger("signalfx_dashboard_group").log_removed("DA0001")
        assert parse_log_lines(captured_logs)[-1]["level"] == "warning"

    def test_updated_carries_start_time_source(self, captured_logs):
        OperationLogger("signalfx_alert_muting_rule").log_updated("AL0001", start_time_source="effective")
        assert parse_log_lines(captured_logs)[-1]["start_time_source"] == "effective"

    def test_payload_dumped_with_wire_names(self, captured_logs):
        payload = CreateUpdateAlertMutingRuleRequest(description="m", startTime=1000, stopTime=0)

        OperationLogger("signalfx_alert_muting_rule").log_payload("Create", payload)

        message = parse_log_lines(captured_logs)[-1]["message"]
        assert "Create signalfx_alert_muting_rule Payload" in message
        assert '"startTime": 1000' in message

    def test_payload_skipped_above_debug(self, captured_logs):
        logging.getLogger("sfxprovider.operations").setLevel(logging.INFO)
        OperationLogger("signalfx_dashboard_group").log_payload("Create", {"name": "x"})
        assert parse_log_lines(captured_logs) == []


class TestConfigureLogging:

    def test_handler_not_stacked(self):
        logger = configure_logging("debug", "json")
        configure_logging("info", "text")

        ours = [h for h in logger.handlers if getattr(h, "_sfxprovider", False)]
        assert len(ours) == 1
        assert logger.level == logging.INFO

    def test_json_format(self):
        logger = configure_logging("info", "json")
        ours = [h for h in logger.handlers if getattr(h, "_sfxprovider", False)]
        assert isinstance(ours[0].formatter, JsonFormatter)
