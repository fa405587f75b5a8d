import pytest

from naybourhood_scoring.models import Buyer
from naybourhood_scoring.scorers import (
    DISQUALIFICATION_REASON,
    calculate_confidence_score,
    calculate_intent_score,
    calculate_quality_score,
    clamp_score,
)

CONTACT = dict(full_name="Jane Smith", email="jane@gmail.com", phone="+447911123456")


def _factors(result):
    return [entry.factor for entry in result.breakdown]


def test_clamp_score_bounds():
    assert clamp_score(-20) == 0
    assert clamp_score(150) == 100
    assert clamp_score(42) == 42


def test_quality_cash_primary_residence_complete_contact():
    result = calculate_quality_score(Buyer(payment_method="Cash", purpose="primary residence", **CONTACT))

    assert result.total == 55
    assert _factors(result) == ["Cash Buyer", "Primary Residence", "Complete Contact Info"]
    assert not result.is_disqualified


@pytest.mark.parametrize(
    "broker, expected_factor, expected_points",
    [
        ("no", "Mortgage + Wants Broker", 15),
        ("yes", "Mortgage + Has Broker", 20),
        (None, "Mortgage Buyer", 10),
    ],
)
def test_quality_mortgage_broker_variants(broker, expected_factor, expected_points):
    result = calculate_quality_score(Buyer(payment_method="mortgage", uk_broker=broker))

    assert result.breakdown[0].factor == expected_factor
    assert result.breakdown[0].points == expected_points


def test_quality_contact_requires_name_email_and_phone():
    result = calculate_quality_score(Buyer(full_name="Bob", email="bob@x.com"))

    assert result.total == 0
    assert result.breakdown[-1].factor == "Incomplete Contact Info"
    assert result.breakdown[-1].reason == "Missing contact information (has: email, name)"


@pytest.mark.parametrize("bedrooms", [0, 1, "1"])
def test_quality_disqualifies_big_budget_small_home(bedrooms):
    result = calculate_quality_score(Buyer(budget="2.5m", bedrooms=bedrooms, payment_method="cash", **CONTACT))

    assert result.is_disqualified
    assert result.total == 0
    assert result.disqualification_reason == DISQUALIFICATION_REASON
    assert [(entry.factor, entry.points) for entry in result.breakdown] == [("Auto-Disqualification", -100)]


def test_quality_big_budget_without_bedrooms_is_not_disqualified():
    assert not calculate_quality_score(Buyer(budget=3_000_000)).is_disqualified
    assert not calculate_quality_score(Buyer(budget=3_000_000, bedrooms=2)).is_disqualified


def test_intent_28_day_purchase():
    result = calculate_intent_score(
        Buyer(timeline="immediate", purpose="primary residence", uk_broker="no", source="Website form")
    )

    assert result.is_28_day_buyer
    assert result.total == 80
    assert _factors(result) == ["28-Day Purchase Intent", "Primary Residence", "Wants Broker", "Source: Form"]


@pytest.mark.parametrize(
    "timeline, expected_factor",
    [
        ("1-3 months", "Timeline 3 Months"),
        ("12 months", "Timeline 6+ Months"),
        ("no rush", "Timeline 6+ Months"),
    ],
)
def test_intent_timeline_buckets(timeline, expected_factor):
    result = calculate_intent_score(Buyer(timeline=timeline))

    assert _factors(result) == [expected_factor]
    assert not result.is_28_day_buyer


def test_intent_four_month_timeline_scores_nothing():
    assert calculate_intent_score(Buyer(timeline="4 months")).total == 0


def test_intent_whatsapp_source_and_broker_already_connected():
    result = calculate_intent_score(Buyer(source_platform="WhatsApp", uk_broker="yes", purpose="student flat"))

    assert _factors(result) == ["Dependent Studying", "Source: WhatsApp"]
    assert result.total == 30


def test_confidence_full_record_reaches_100():
    buyer = Buyer(
        budget="500k",
        payment_method="cash",
        proof_of_funds=True,
        timeline="3 months",
        bedrooms=2,
        area="Camden",
        source="form",
        purpose="investment",
        **CONTACT,
    )

    result = calculate_confidence_score(buyer)

    assert result.total == 100
    assert len(result.breakdown) == 11


def test_confidence_ignores_blank_values():
    result = calculate_confidence_score(Buyer(full_name="  ", email="", budget_min="250000", proof_of_funds=False))

    assert _factors(result) == ["Budget"]
    assert result.total == 10


def test_empty_buyer_scores_zero():
    buyer = Buyer()

    quality = calculate_quality_score(buyer)
    assert quality.total == 0
    assert _factors(quality) == ["Incomplete Contact Info"]
    assert calculate_intent_score(buyer).total == 0
    assert calculate_confidence_score(buyer).total == 0
