"""
Projection of remote entities back onto declared resource state.
"""

from __future__ import annotations

import logging
from typing import Optional

from sfxprovider.models import (
    AlertMutingRule,
    AlertMutingRuleState,
    DashboardGroup,
    DashboardGroupState,
)
from sfxprovider.reconcile.filters import partition_filters
from sfxprovider.reconcile.timewindow import millis_to_seconds

logger = logging.getLogger(__name__)


def project_alert_muting_rule(
    state: Optional[AlertMutingRuleState],
    entity: AlertMutingRule,
) -> AlertMutingRuleState:
    """
    Map an API muting rule onto declared state.

    Returns a new state; ``state`` is not modified. The declared
    ``start_time`` is kept as is. When there is no prior state (pass-through
    import) it is seeded from the remote start time since nothing was declared.

    Filters, detectors, effective start and stop time are only refreshed when
    the remote rule carries filters; a rule without filters leaves them as
    they were.
    """
    if state is None:
        state = AlertMutingRuleState(
            description=entity.description,
            filter=set(),
            start_time=millis_to_seconds(entity.start_time),
        )

    update: dict = {"description": entity.description}

    if entity.filters:
        filters, detectors = partition_filters(entity.filters)
        update["filter"] = filters
        update["detectors"] = detectors
        # Stored in milliseconds, the unit the API compares against
        update["effective_start_time"] = entity.start_time
        update["stop_time"] = millis_to_seconds(entity.stop_time)
    else:
        logger.debug("Alert muting rule %s has no filters", entity.id)

    return state.model_copy(update=update)


def project_dashboard_group(entity: DashboardGroup) -> DashboardGroupState:
    """Map an API dashboard group onto declared state."""
    return DashboardGroupState(name=entity.name, description=entity.description)
