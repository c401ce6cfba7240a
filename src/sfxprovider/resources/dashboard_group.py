"""``signalfx_dashboard_group`` resource: name and description only."""

from __future__ import annotations

from sfxprovider.client import ClientContext
from sfxprovider.errors import NotFoundError
from sfxprovider.models import DashboardGroup, DashboardGroupState
from sfxprovider.otel import emit_operation
from sfxprovider.reconcile import project_dashboard_group
from sfxprovider.resources.base import Resource, ResourceData, register_resource


def build_payload(state: DashboardGroupState) -> dict:
    return {"name": state.name, "description": state.description}


@register_resource("signalfx_dashboard_group")
class DashboardGroupResource(Resource[DashboardGroupState]):
    state_model = DashboardGroupState

    def create(self, ctx, data):
        payload = build_payload(data.state)
        self.oplog.log_payload("Create", payload)
        group = ctx.client.create_dashboard_group(payload)
        self.oplog.log_created(group.id)
        emit_operation("create", self.type_name, group.id)
        return ResourceData(id=group.id, state=project_dashboard_group(group))

    def fetch(self, ctx: ClientContext, resource_id: str) -> DashboardGroup:
        return ctx.client.get_dashboard_group(resource_id)

    def read(self, ctx, data):
        try:
            group = self.fetch(ctx, data.id)
        except NotFoundError:
            self.oplog.log_removed(data.id)
            return ResourceData(id="", state=data.state)
        emit_operation("read", self.type_name, group.id)
        return ResourceData(id=group.id, state=project_dashboard_group(group))

    def update(self, ctx, data):
        payload = build_payload(data.state)
        self.oplog.log_payload("Update", payload)
        group = ctx.client.update_dashboard_group(data.id, payload)
        self.oplog.log_updated(group.id)
        emit_operation("update", self.type_name, group.id)
        return ResourceData(id=group.id, state=project_dashboard_group(group))

    def delete(self, ctx, data):
        ctx.client.delete_dashboard_group(data.id)
        self.oplog.log_deleted(data.id)
        emit_operation("delete", self.type_name, data.id)
