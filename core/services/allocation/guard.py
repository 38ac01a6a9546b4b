from __future__ import annotations

import logging

from core.exceptions import HardCapExceeded, JustificationRequired
from core.models import AllocationType, ConflictClassification
from core.services.allocation.aggregator import OverlapAggregator
from core.services.allocation.classifier import ConflictClassifier
from core.services.allocation.models import BookingPreview, BookingRequest
from core.services.allocation.policy import PolicyResolver

logger = logging.getLogger(__name__)


class BookingGuard:
    """
    Admission control for a single booking.

    Checks run in a fixed order: GHOST short-circuit, hard cap, justification.
    The hard cap is evaluated before anything that could accept the request, so
    no justification can push a resource to or past ``max_allocation``.
    Callers that write must hold the resource lock around validate + persist.
    """

    def __init__(
        self,
        policy_resolver: PolicyResolver,
        aggregator: OverlapAggregator,
        classifier: ConflictClassifier | None = None,
    ):
        self._policy_resolver = policy_resolver
        self._aggregator = aggregator
        self._classifier = classifier or ConflictClassifier()

    def validate(
        self,
        request: BookingRequest,
        exclude_allocation_id: str | None = None,
    ) -> BookingPreview:
        if request.type == AllocationType.GHOST:
            return BookingPreview(
                classification=ConflictClassification.NONE,
                projected_total=0.0,
                skipped=True,
            )

        thresholds = self._policy_resolver.resolve(request.workspace_id)
        load = self._aggregator.compute_load(
            request.resource_id,
            request.start_date,
            request.end_date,
            exclude_allocation_id,
        )

        pct = float(request.allocation_percentage)
        projected_hard = load.hard_load + (pct if request.type == AllocationType.HARD else 0.0)
        projected_soft = load.soft_load + (pct if request.type == AllocationType.SOFT else 0.0)
        projected_total = projected_hard + projected_soft
        context = {
            "hard_load": load.hard_load,
            "soft_load": load.soft_load,
            "projected_total": projected_total,
        }

        if projected_total >= thresholds.max_allocation:
            logger.warning(
                "Hard cap blocked booking for resource %s: current=%.1f projected=%.1f cap=%.1f",
                request.resource_id,
                load.total,
                projected_total,
                thresholds.max_allocation,
            )
            raise HardCapExceeded(
                f"Resource allocation would reach the hard cap of {thresholds.max_allocation:g}%. "
                f"Current load: {load.total:g}%, projected total: {projected_total:g}%.",
                threshold=thresholds.max_allocation,
                **context,
            )

        if projected_total >= thresholds.justification and not request.has_justification:
            logger.info(
                "Justification required for resource %s: projected=%.1f threshold=%.1f",
                request.resource_id,
                projected_total,
                thresholds.justification,
            )
            raise JustificationRequired(
                f"Justification is required for allocations reaching {thresholds.justification:g}%. "
                f"Projected total: {projected_total:g}%.",
                threshold=thresholds.justification,
                **context,
            )

        result = self._classifier.classify(projected_hard, projected_soft, thresholds)
        return BookingPreview(
            classification=result.classification,
            projected_total=result.total_load,
            hard_load=load.hard_load,
            soft_load=load.soft_load,
            projected_hard=projected_hard,
            projected_soft=projected_soft,
        )


__all__ = ["BookingGuard"]
