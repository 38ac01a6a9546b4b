from __future__ import annotations

import pytest

from core.exceptions import HardCapExceeded, JustificationRequired
from core.models import ConflictClassification


def test_first_hard_booking_on_idle_resource_is_unflagged(detect, book):
    book("HARD", 50)

    report = detect()
    assert report.as_dict() == {"hard_load": 50.0, "soft_load": 0.0, "classification": "NONE"}


def test_soft_booking_on_top_moves_resource_into_warning(detect, book):
    book("HARD", 50)
    result = book("SOFT", 40)

    assert result.preview.classification == ConflictClassification.WARNING
    report = detect()
    assert report.hard_load == 50.0
    assert report.soft_load == 40.0
    assert report.total_load == 90.0
    assert report.classification == ConflictClassification.WARNING


def test_booking_past_justification_threshold_needs_text_then_succeeds(detect, book):
    book("HARD", 50)
    book("SOFT", 40)

    with pytest.raises(JustificationRequired) as excinfo:
        book("HARD", 30)

    err = excinfo.value
    assert err.code == "JUSTIFICATION_REQUIRED"
    assert "ustification" in str(err)
    assert "100%" in str(err)
    assert err.threshold == 100.0
    assert err.projected_total == 120.0
    assert err.current_load == 90.0

    result = book("HARD", 30, justification="Critical project requirement")
    assert result.allocation.justification == "Critical project requirement"
    assert result.preview.projected_total == 120.0
    assert result.preview.classification == ConflictClassification.REQUIRES_APPROVAL
    assert detect().hard_load == 80.0


@pytest.mark.parametrize("justification", [None, "Board approved the overtime"])
def test_hard_cap_rejects_regardless_of_justification(detect, book, justification):
    book("HARD", 50)
    book("SOFT", 40)
    book("HARD", 30, justification="Critical project requirement")

    with pytest.raises(HardCapExceeded) as excinfo:
        book("SOFT", 50, justification=justification)

    err = excinfo.value
    assert err.code == "HARD_CAP_EXCEEDED"
    assert "hard cap" in str(err)
    assert "150%" in str(err)
    assert err.projected_total == 170.0
    assert err.to_dict()["current_load"] == 120.0
    assert detect().total_load == 120.0


def test_ghost_booking_leaves_preview_untouched(detect, book):
    book("HARD", 50)
    book("SOFT", 40)
    before = detect()

    result = book("GHOST", 200)

    assert result.preview.skipped is True
    assert result.allocation.allocation_percentage == 200.0
    after = detect()
    assert after == before
    assert after.as_dict() == before.as_dict()
