"""
Review Decision

A reconciliation result is only a proposal. The reviewer either accepts it
(the processed data is committed by the host) or cancels it (the host keeps
the data as it was before the run).
"""

import logging
from enum import Enum
from typing import Callable, Optional

from reconciliation.change_set import ReconciliationResult
from reconciliation.schedule_models import ImportedSchedule

logger = logging.getLogger(__name__)

ReviewCallback = Callable[[ImportedSchedule], None]


class ReviewDecision(str, Enum):
    """Reviewer decision on a change-set."""
    ACCEPT = "accept"
    CANCEL = "cancel"


def choose_dataset(
    decision: ReviewDecision,
    original_data: ImportedSchedule,
    processed_data: ImportedSchedule
) -> ImportedSchedule:
    """Return the dataset the host should keep for a decision."""
    if decision == ReviewDecision.ACCEPT:
        return processed_data
    return original_data


def resolve_review(
    result: ReconciliationResult,
    decision: ReviewDecision,
    on_accept: Optional[ReviewCallback] = None,
    on_cancel: Optional[ReviewCallback] = None
) -> ImportedSchedule:
    """
    Apply a reviewer decision to a reconciliation result.

    Args:
        result: Result of the reconciliation run
        decision: ACCEPT or CANCEL
        on_accept: Called with the processed data when accepted
        on_cancel: Called with the original snapshot when cancelled

    Returns:
        The dataset the host should keep
    """
    decision = ReviewDecision(decision)
    dataset = choose_dataset(decision, result.original_data, result.processed_data)

    logger.info(
        f"Review {decision.value} for run {result.run_id}",
        extra={"run_id": result.run_id, "summary": result.summary()}
    )

    callback = on_accept if decision == ReviewDecision.ACCEPT else on_cancel
    if callback is not None:
        callback(dataset)

    return dataset
