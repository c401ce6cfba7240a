"""
Filter partitioning for alert muting rules.

The API has a single filter list. Detector references travel in it as
ordinary filters on the reserved ``sf_detectorId`` property; the declared
form exposes them as a separate ``detectors`` attribute instead.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple

from sfxprovider.models import AlertMutingRuleFilter, MutingFilter

DETECTOR_PROPERTY = "sf_detectorId"


def combine_filters(
    filters: Iterable[MutingFilter],
    detectors: Optional[Iterable[str]] = None,
) -> List[AlertMutingRuleFilter]:
    """Build the outgoing filter list from declared filters and detector ids.

    Each detector id becomes a non-negated filter on ``DETECTOR_PROPERTY``.
    """
    combined = [
        AlertMutingRuleFilter(
            property=f.property,
            property_value=f.property_value,
            not_=f.negated,
        )
        for f in filters
    ]
    for detector_id in detectors or ():
        combined.append(
            AlertMutingRuleFilter(
                property=DETECTOR_PROPERTY,
                property_value=detector_id,
                not_=False,
            )
        )
    return combined


def partition_filters(
    remote: Iterable[AlertMutingRuleFilter],
) -> Tuple[Set[MutingFilter], List[str]]:
    """Split a remote filter list into declared filters and detector ids.

    Returns:
        Tuple of (filter set, detector ids in remote order)
    """
    filters: Set[MutingFilter] = set()
    detectors: List[str] = []
    for f in remote:
        if f.property == DETECTOR_PROPERTY:
            detectors.append(f.property_value)
        else:
            filters.add(
                MutingFilter(
                    property=f.property,
                    property_value=f.property_value,
                    negated=f.not_,
                )
            )
    return filters, detectors
