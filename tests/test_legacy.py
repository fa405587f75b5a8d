import pytest

from naybourhood_scoring import (
    calculate_nb_score,
    convert_to_legacy_format,
    get_nb_score_color,
    nb_score_for,
    score_lead_naybourhood,
)
from naybourhood_scoring.classification import determine_call_priority
from naybourhood_scoring.legacy import LEGACY_CLASSIFICATIONS, LEGACY_PRIORITIES
from naybourhood_scoring.models import Classification, IntentScoreResult


def test_legacy_format_for_hot_lead():
    result = score_lead_naybourhood(
        {
            "full_name": "Jane Smith",
            "email": "jane@gmail.com",
            "phone": "+447911123456",
            "payment_method": "cash",
            "purpose": "primary residence",
            "budget": "900000",
            "bedrooms": 2,
            "timeline": "immediate",
            "uk_broker": "no",
        }
    )

    legacy = convert_to_legacy_format(result)

    assert legacy.ai_quality_score == 55
    assert legacy.ai_intent_score == 70
    assert legacy.ai_confidence == 8.0
    assert legacy.ai_classification == "Hot"
    assert legacy.ai_priority == "P1"
    assert legacy.as_dict()["ai_risk_flags"] == []


def test_every_classification_has_a_legacy_label():
    assert set(LEGACY_CLASSIFICATIONS) == set(Classification)
    assert LEGACY_CLASSIFICATIONS[Classification.NURTURE] == "Nurture-Premium"
    assert LEGACY_CLASSIFICATIONS[Classification.NEEDS_QUALIFICATION] == "Nurture-Standard"


def test_priority_five_maps_to_p4():
    priority = determine_call_priority(Classification.LOW_PRIORITY, IntentScoreResult(total=0))

    assert LEGACY_PRIORITIES[priority.level] == "P4"


@pytest.mark.parametrize(
    "scores, expected",
    [
        ((55, 70, 8.0), 65),
        ((100, 100, 10), 100),
        ((0, 0, 0), 0),
        ((41, 0, 0), 21),
    ],
)
def test_calculate_nb_score_rounds_half_up(scores, expected):
    assert calculate_nb_score(*scores) == expected


def test_nb_score_colours():
    assert get_nb_score_color(70) == "#34D399"
    assert get_nb_score_color(40) == "#FBBF24"
    assert get_nb_score_color(39) == "#EF4444"


def test_nb_score_for_result():
    result = score_lead_naybourhood({"full_name": "Jane Smith", "email": "jane@gmail.com", "budget": "500k"})

    expected = calculate_nb_score(
        result.quality_score.total,
        result.intent_score.total,
        result.confidence_score.total / 10,
    )
    assert nb_score_for(result) == expected
