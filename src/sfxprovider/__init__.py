"""
sfxprovider - Declarative management of SignalFx resources.

Translates declared resources (alert muting rules, dashboard groups) into
calls against the SignalFx REST API and reconciles what the API reports
back onto the declared state.

Key Features:
- Create/read/update/delete/exists/import lifecycle per resource type
- Detector ids exposed as their own attribute, sent as ``sf_detectorId`` filters
- Server-adjusted muting start times tracked as ``effective_start_time``
- Local JSON state file and a click CLI (``sfxprovider apply``)

Example usage:
    from sfxprovider import ClientContext, ResourceData, get_resource, load_config
    from sfxprovider.models import AlertMutingRuleState

    declared = AlertMutingRuleState(
        description="Weekly maintenance",
        filter=[{"property": "env", "property_value": "prod"}],
        start_time=1767225600,
    )
    with ClientContext.from_config(load_config()) as ctx:
        handler = get_resource("signalfx_alert_muting_rule")
        data = handler.create(ctx, ResourceData(state=declared))
"""

__version__ = "0.1.0"
__all__ = [
    "ClientContext",
    "ResourceData",
    "get_resource",
    "load_config",
    "__version__",
]


# Lazy imports to avoid loading httpx and pydantic at import time
def __getattr__(name: str):
    if name == "ClientContext":
        from sfxprovider.client import ClientContext
        return ClientContext
    if name == "ResourceData":
        from sfxprovider.resources import ResourceData
        return ResourceData
    if name == "get_resource":
        from sfxprovider.resources import get_resource
        return get_resource
    if name == "load_config":
        from sfxprovider.config import load_config
        return load_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
