"""
Reconciliation between declared resource state and what the API reports.

- ``filters``: detector ids <-> ``sf_detectorId`` filters
- ``timewindow``: declared vs. effective start time of muting rules
- ``projector``: API entity -> declared/observed state

Example:
    from sfxprovider.reconcile import combine_filters, project_alert_muting_rule

    payload_filters = combine_filters(state.filter, state.detectors)
    state = project_alert_muting_rule(state, rule)
"""

from sfxprovider.reconcile.filters import (
    DETECTOR_PROPERTY,
    combine_filters,
    partition_filters,
)
from sfxprovider.reconcile.projector import (
    project_alert_muting_rule,
    project_dashboard_group,
)
from sfxprovider.reconcile.timewindow import (
    creation_start_time,
    millis_to_seconds,
    seconds_to_millis,
    select_update_start_time,
    update_start_time,
)

__all__ = [
    "DETECTOR_PROPERTY",
    "combine_filters",
    "partition_filters",
    "project_alert_muting_rule",
    "project_dashboard_group",
    "creation_start_time",
    "select_update_start_time",
    "update_start_time",
    "seconds_to_millis",
    "millis_to_seconds",
]
