"""
``signalfx_alert_muting_rule`` resource.

Declared attributes:
    description (required), detectors, filter (required set of
    {property, property_value, negated}), start_time (required, seconds,
    forces recreation), stop_time (seconds, 0 = no stop).

Observed attributes:
    effective_start_time (milliseconds, the start the API actually honors)
"""

from __future__ import annotations

import logging

from sfxprovider.client import ClientContext
from sfxprovider.errors import NotFoundError
from sfxprovider.models import (
    AlertMutingRule,
    AlertMutingRuleState,
    CreateUpdateAlertMutingRuleRequest,
)
from sfxprovider.otel import emit_operation
from sfxprovider.reconcile import (
    combine_filters,
    creation_start_time,
    project_alert_muting_rule,
    seconds_to_millis,
    select_update_start_time,
)
from sfxprovider.resources.base import Resource, ResourceData, register_resource

logger = logging.getLogger(__name__)


def build_payload(state: AlertMutingRuleState) -> CreateUpdateAlertMutingRuleRequest:
    """Build the create/update request body from declared state."""
    return CreateUpdateAlertMutingRuleRequest(
        description=state.description,
        filters=combine_filters(state.filter, state.detectors),
        start_time=creation_start_time(state),
        stop_time=seconds_to_millis(state.stop_time),
    )


@register_resource("signalfx_alert_muting_rule")
class AlertMutingRuleResource(Resource[AlertMutingRuleState]):
    """Lifecycle of alert muting rules."""

    state_model = AlertMutingRuleState

    def create(self, ctx, data):
        payload = build_payload(data.state)
        self.oplog.log_payload("Create", payload)

        rule = ctx.client.create_alert_muting_rule(payload)

        self.oplog.log_created(rule.id)
        emit_operation("create", self.type_name, rule.id)
        return ResourceData(id=rule.id, state=project_alert_muting_rule(data.state, rule))

    def fetch(self, ctx: ClientContext, resource_id: str) -> AlertMutingRule:
        return ctx.client.get_alert_muting_rule(resource_id)

    def read(self, ctx, data):
        try:
            rule = self.fetch(ctx, data.id)
        except NotFoundError:
            self.oplog.log_removed(data.id)
            return ResourceData(id="", state=data.state)

        emit_operation("read", self.type_name, rule.id)
        return ResourceData(id=rule.id, state=project_alert_muting_rule(data.state, rule))

    def update(self, ctx, data):
        payload = build_payload(data.state)
        payload.start_time, start_time_source = select_update_start_time(data.state)
        self.oplog.log_payload("Update", payload)

        rule = ctx.client.update_alert_muting_rule(data.id, payload)
        logger.debug("SignalFx: Update Alert Muting Rule Response: %s", rule.model_dump_json(by_alias=True))

        self.oplog.log_updated(rule.id, start_time_source=start_time_source)
        emit_operation("update", self.type_name, rule.id)
        return ResourceData(id=rule.id, state=project_alert_muting_rule(data.state, rule))

    def delete(self, ctx, data):
        ctx.client.delete_alert_muting_rule(data.id)
        self.oplog.log_deleted(data.id)
        emit_operation("delete", self.type_name, data.id)

    def requires_replacement(self, old, new):
        return old.start_time != new.start_time

    def prepare_update(self, tracked, declared):
        """Carry the observed effective start over into the declared state."""
        observed = tracked.state.effective_start_time if tracked.state else None
        return ResourceData(
            id=tracked.id,
            state=declared.model_copy(update={"effective_start_time": observed}),
        )
