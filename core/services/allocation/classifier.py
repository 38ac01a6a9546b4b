from __future__ import annotations

from core.models import ConflictClassification, Thresholds
from core.services.allocation.models import Classification


def classify(hard_load: float, soft_load: float, thresholds: Thresholds) -> Classification:
    """
    Map a load onto the policy tiers.

    Tiers are half-open: NONE [0, warning), WARNING [warning, justification),
    REQUIRES_JUSTIFICATION [justification, approval), REQUIRES_APPROVAL
    [approval, max_allocation), OVER_CAP [max_allocation, inf). Loads already past
    the cap (e.g. after thresholds were lowered) classify as OVER_CAP.
    """
    total = float(hard_load) + float(soft_load)
    if total >= thresholds.max_allocation:
        tier = ConflictClassification.OVER_CAP
    elif total >= thresholds.approval:
        tier = ConflictClassification.REQUIRES_APPROVAL
    elif total >= thresholds.justification:
        tier = ConflictClassification.REQUIRES_JUSTIFICATION
    elif total >= thresholds.warning:
        tier = ConflictClassification.WARNING
    else:
        tier = ConflictClassification.NONE
    return Classification(classification=tier, total_load=total)


class ConflictClassifier:
    def classify(self, hard_load: float, soft_load: float, thresholds: Thresholds) -> Classification:
        return classify(hard_load, soft_load, thresholds)


__all__ = ["classify", "ConflictClassifier"]
