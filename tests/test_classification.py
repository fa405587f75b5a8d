from datetime import datetime, timezone

import pytest

from naybourhood_scoring.classification import (
    detect_low_urgency,
    determine_call_priority,
    determine_classification,
    generate_risk_flags,
    lead_age_days,
)
from naybourhood_scoring.models import (
    Buyer,
    Classification,
    ConfidenceScoreResult,
    FakeLeadCheckResult,
    IntentScoreResult,
    QualityScoreResult,
)

NOT_FAKE = FakeLeadCheckResult(is_fake=False)
NOW = datetime(2026, 3, 15, tzinfo=timezone.utc)


def _classify(quality, intent, confidence, *, fake=False, low_urgency=False, disqualified=False, ready=False):
    return determine_classification(
        QualityScoreResult(total=quality, is_disqualified=disqualified),
        IntentScoreResult(total=intent, is_28_day_buyer=ready),
        ConfidenceScoreResult(total=confidence),
        FakeLeadCheckResult(is_fake=fake),
        low_urgency,
    )


@pytest.mark.parametrize(
    "scores, expected",
    [
        ((70, 70, 60), Classification.HOT_LEAD),
        ((65, 55, 60), Classification.QUALIFIED),
        ((55, 30, 60), Classification.NURTURE),
        ((55, 30, 40), Classification.NEEDS_QUALIFICATION),
        ((45, 60, 60), Classification.NEEDS_QUALIFICATION),
        ((39, 90, 90), Classification.LOW_PRIORITY),
    ],
)
def test_classification_table(scores, expected):
    assert _classify(*scores) is expected


def test_low_urgency_forces_low_priority():
    assert _classify(80, 40, 80, low_urgency=True) is Classification.LOW_PRIORITY


def test_fake_or_disqualified_beats_28_day_readiness():
    assert _classify(100, 100, 100, fake=True, ready=True) is Classification.DISQUALIFIED
    assert _classify(0, 100, 100, disqualified=True, ready=True) is Classification.DISQUALIFIED


def test_28_day_readiness_beats_low_scores():
    assert _classify(0, 40, 0, low_urgency=True, ready=True) is Classification.HOT_LEAD


def test_call_priority_lookup():
    intent = IntentScoreResult(total=50)

    assert determine_call_priority(Classification.QUALIFIED, intent).level == 2
    assert determine_call_priority("Low Priority", intent).response_time == "Within 1 week"
    assert determine_call_priority(Classification.DISQUALIFIED, intent).response_time == "N/A"
    assert determine_call_priority("Something Else", intent).level == 4


def test_call_priority_28_day_override():
    priority = determine_call_priority(Classification.NURTURE, IntentScoreResult(total=40, is_28_day_buyer=True))

    assert priority.level == 1
    assert priority.response_time == "Within 1 hour"
    assert priority.description == "28-Day Buyer - Immediate Priority"


@pytest.mark.parametrize(
    "buyer, expected",
    [
        (Buyer(timeline="Flexible"), True),
        (Buyer(timeline_to_purchase="within 2 years"), True),
        (Buyer(purpose="holiday"), True),
        (Buyer(purpose="holiday", timeline="3 months"), False),
        (Buyer(status="Cold"), True),
        (Buyer(status="Follow Up"), False),
        (Buyer(), False),
    ],
)
def test_detect_low_urgency(buyer, expected):
    assert detect_low_urgency(buyer) is expected


def test_lead_age_days_handles_naive_and_invalid_dates():
    assert lead_age_days(Buyer(created_at="2026-01-01"), NOW) == 73
    assert lead_age_days(Buyer(date_added="2026-03-01T12:00:00", created_at="2020-01-01"), NOW) == 13
    assert lead_age_days(Buyer(created_at="not a date"), NOW) is None
    assert lead_age_days(Buyer(), NOW) is None


def test_lead_age_days_reads_numbers_as_epoch_milliseconds():
    buyer = Buyer(full_name="Jane Smith", timeline="3 months", created_at=1_700_000_000_000)

    assert lead_age_days(buyer, NOW) == 851
    assert generate_risk_flags(buyer, NOT_FAKE, QualityScoreResult(total=50), now=NOW) == ("Lead is 851 days old",)
    assert lead_age_days(Buyer(created_at=True), NOW) is None


def test_risk_flags_order_and_content():
    buyer = Buyer(
        full_name="Jane Smith",
        payment_method="Mortgage",
        mortgage_status="pending",
        country="UAE",
        created_at="2026-01-01",
    )

    flags = generate_risk_flags(buyer, NOT_FAKE, QualityScoreResult(total=10), now=NOW)

    assert flags == (
        "Mortgage not yet approved",
        "Timeline not specified",
        "Mortgage buyer without broker",
        "International buyer - may need extended timeline",
        "Lead is 73 days old",
    )


def test_risk_flags_are_capped_and_fake_flags_come_first():
    buyer = Buyer(payment_method="mortgage", country="France", created_at="2025-01-01")
    fake_check = FakeLeadCheckResult(is_fake=True, flags=("one", "two", "three"), confidence=0.9)
    quality = QualityScoreResult(total=0, is_disqualified=True, disqualification_reason="mismatch")

    flags = generate_risk_flags(buyer, fake_check, quality, now=NOW)

    assert len(flags) == 5
    assert flags[:3] == ("one", "two", "mismatch")


def test_risk_flags_skip_approved_mortgage_and_uk_buyers():
    buyer = Buyer(
        payment_method="mortgage",
        mortgage_status="AIP",
        uk_broker="yes",
        country="England",
        timeline="3 months",
        created_at="2026-03-01",
    )

    assert generate_risk_flags(buyer, NOT_FAKE, QualityScoreResult(total=50), now=NOW) == ()
