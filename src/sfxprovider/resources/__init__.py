"""
Managed resource types.

Each handler implements the create/read/update/delete/exists/import
lifecycle against the SignalFx API:

- ``signalfx_alert_muting_rule``
- ``signalfx_dashboard_group``

Example:
    from sfxprovider.resources import ResourceData, get_resource

    handler = get_resource("signalfx_alert_muting_rule")
    data = handler.create(ctx, ResourceData(state=declared))
"""

from sfxprovider.resources.base import (
    Resource,
    ResourceData,
    get_resource,
    register_resource,
    resource_types,
)
from sfxprovider.resources.alert_muting_rule import AlertMutingRuleResource
from sfxprovider.resources.dashboard_group import DashboardGroupResource

__all__ = [
    "Resource",
    "ResourceData",
    "get_resource",
    "register_resource",
    "resource_types",
    "AlertMutingRuleResource",
    "DashboardGroupResource",
]
