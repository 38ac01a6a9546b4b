from __future__ import annotations

import pytest

from core.exceptions import HardCapExceeded, JustificationRequired, PolicyMisconfigured, ValidationError
from core.models import DEFAULT_THRESHOLDS, ConflictClassification, Thresholds
from core.services.allocation import ConflictClassifier, classify


@pytest.mark.parametrize(
    "total, expected",
    [
        (0.0, ConflictClassification.NONE),
        (79.99, ConflictClassification.NONE),
        (80.0, ConflictClassification.WARNING),
        (99.99, ConflictClassification.WARNING),
        (100.0, ConflictClassification.REQUIRES_JUSTIFICATION),
        (119.99, ConflictClassification.REQUIRES_JUSTIFICATION),
        (120.0, ConflictClassification.REQUIRES_APPROVAL),
        (149.99, ConflictClassification.REQUIRES_APPROVAL),
        (150.0, ConflictClassification.OVER_CAP),
        (400.0, ConflictClassification.OVER_CAP),
    ],
)
def test_default_tier_boundaries(total, expected):
    result = classify(total, 0.0, DEFAULT_THRESHOLDS)
    assert result.classification == expected
    assert result.total_load == total


def test_classifier_sums_hard_and_soft():
    result = ConflictClassifier().classify(50.0, 40.0, DEFAULT_THRESHOLDS)
    assert result.total_load == 90.0
    assert result.classification == ConflictClassification.WARNING


def test_equal_thresholds_collapse_empty_tiers():
    thresholds = Thresholds(warning=100, justification=100, approval=100, max_allocation=120)
    assert classify(99, 0, thresholds).classification == ConflictClassification.NONE
    assert classify(100, 0, thresholds).classification == ConflictClassification.REQUIRES_APPROVAL


@pytest.mark.parametrize(
    "values",
    [
        dict(warning=90, justification=80, approval=120, max_allocation=150),
        dict(warning=80, justification=130, approval=120, max_allocation=150),
        dict(warning=80, justification=100, approval=160, max_allocation=150),
        dict(warning=0, justification=100, approval=120, max_allocation=150),
        dict(warning=80, justification=100, approval=120, max_allocation=float("inf")),
    ],
)
def test_thresholds_validate_rejects_out_of_order_values(values):
    with pytest.raises(PolicyMisconfigured) as excinfo:
        Thresholds(**values).validate()
    assert excinfo.value.code == "POLICY_MISCONFIGURED"
    assert isinstance(excinfo.value, ValidationError)


def test_resolve_returns_defaults_without_writing(services, session):
    resolver = services["policy_resolver"]

    assert resolver.resolve("ws-unknown") == DEFAULT_THRESHOLDS
    policy = resolver.get_policy("ws-unknown")
    assert policy.is_default is True
    assert policy.version == 0
    # reads never create a row
    assert resolver._policy_repo.get("ws-unknown") is None


def test_upsert_policy_merges_partial_changes(services):
    resolver = services["policy_resolver"]

    first = resolver.upsert_policy("ws-1", warning=70)
    assert first.thresholds == Thresholds(warning=70, justification=100, approval=120, max_allocation=150)
    assert first.version == 1

    second = resolver.upsert_policy("ws-1", max_allocation=130)
    assert second.thresholds.warning == 70
    assert second.thresholds.max_allocation == 130
    assert second.version == 2
    assert resolver.resolve("ws-1") == second.thresholds


def test_upsert_policy_rejects_misordered_merge_and_keeps_previous(services):
    resolver = services["policy_resolver"]
    resolver.upsert_policy("ws-1", approval=110)

    with pytest.raises(PolicyMisconfigured):
        resolver.upsert_policy("ws-1", justification=115)

    assert resolver.resolve("ws-1").approval == 110
    assert resolver.resolve("ws-1").justification == 100


def test_upsert_policy_requires_workspace(services):
    with pytest.raises(ValidationError):
        services["policy_resolver"].upsert_policy("  ", warning=70)


@pytest.mark.parametrize(
    "changes",
    [
        {"warning": "eighty"},
        {"approval": None, "max_allocation": float("inf")},
        {"justification": float("nan")},
        {"warning": True},
        {"max_allocation": object()},
    ],
)
def test_upsert_policy_rejects_non_numeric_or_infinite_thresholds(services, changes):
    resolver = services["policy_resolver"]

    with pytest.raises(PolicyMisconfigured) as excinfo:
        resolver.upsert_policy("ws-1", **changes)

    assert excinfo.value.code == "POLICY_MISCONFIGURED"
    assert resolver.get_policy("ws-1").is_default is True


def test_workspace_policy_drives_the_guard(services, book):
    services["policy_resolver"].upsert_policy(
        "ws-1", warning=50, justification=60, approval=90, max_allocation=100
    )

    book("HARD", 55)
    with pytest.raises(JustificationRequired) as excinfo:
        book("SOFT", 10)
    assert excinfo.value.threshold == 60

    with pytest.raises(HardCapExceeded) as excinfo:
        book("SOFT", 45, justification="client escalation")
    assert excinfo.value.threshold == 100

    result = book("SOFT", 40, justification="client escalation")
    assert result.preview.classification == ConflictClassification.REQUIRES_APPROVAL


def test_policy_of_another_workspace_is_not_applied(services, book):
    services["policy_resolver"].upsert_policy(
        "ws-2", warning=10, justification=20, approval=30, max_allocation=40
    )

    result = book("HARD", 70)

    assert result.preview.classification == ConflictClassification.NONE


def test_lowered_cap_classifies_existing_load_as_over_cap(services, book, detect):
    book("HARD", 90)
    services["policy_resolver"].upsert_policy(
        "ws-1", warning=50, justification=60, approval=70, max_allocation=80
    )

    report = detect()
    assert report.classification == ConflictClassification.OVER_CAP
    with pytest.raises(HardCapExceeded):
        book("SOFT", 1, justification="anything")


def test_detect_without_workspace_uses_default_thresholds(services, book, detect):
    services["policy_resolver"].upsert_policy(
        "ws-1", warning=10, justification=20, approval=30, max_allocation=200
    )
    book("HARD", 50, justification="ok")

    assert detect(workspace_id=None).classification == ConflictClassification.NONE
    assert detect().classification == ConflictClassification.REQUIRES_APPROVAL
