import pytest

from naybourhood_scoring.models import Buyer
from naybourhood_scoring.normalizers import (
    get_bedrooms,
    get_budget,
    get_name,
    get_purchase_purpose,
    get_source_type,
    get_timeline_months,
    has_broker,
    is_28_day_ready,
    parse_budget,
    wants_broker,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("500k-750k", 500_000),
        ("1.5m", 1_500_000),
        ("£1.5M", 1_500_000),
        ("£450,000", 450_000),
        ("1m to 2m", 1_000_000),
        ("£2M+", 2),
        (750000, 750_000),
        ("", 0),
        (None, 0),
        ("ask me later", 0),
    ],
)
def test_parse_budget(value, expected):
    assert parse_budget(value) == expected


def test_budget_aliases_use_first_present_value():
    assert get_budget(Buyer(budget="", budget_range="300k-400k", budget_min="100k")) == 300_000
    assert get_budget(Buyer()) == 0


def test_bedrooms_zero_is_a_real_value():
    assert get_bedrooms(Buyer(bedrooms=0, preferred_bedrooms=3)) == 0
    assert get_bedrooms(Buyer(preferred_bedrooms="2 bed")) == 2
    assert get_bedrooms(Buyer()) is None
    assert get_bedrooms(Buyer(bedrooms="studio")) is None


def test_name_falls_back_to_first_and_last():
    assert get_name(Buyer(full_name="Jane Smith", first_name="J")) == "Jane Smith"
    assert get_name(Buyer(first_name="Jane", last_name="Smith")) == "Jane Smith"
    assert get_name(Buyer()) == ""


def test_broker_status():
    assert wants_broker(Buyer(uk_broker="No"))
    assert wants_broker(Buyer(connect_to_broker=True))
    assert not wants_broker(Buyer(uk_broker="yes"))
    assert has_broker(Buyer(uk_broker="Introduced"))
    assert has_broker(Buyer(uk_broker=True))
    assert not has_broker(Buyer())


@pytest.mark.parametrize(
    "purpose, expected",
    [
        ("Primary Residence", "primary_residence"),
        ("For my son studying in London", "dependent_studying"),
        ("BTL", "investment"),
        ("Second property", "holiday_home"),
        ("Retirement", "retirement"),
        (None, "unknown"),
    ],
)
def test_purchase_purpose(purpose, expected):
    assert get_purchase_purpose(Buyer(purpose=purpose)) == expected


def test_purchase_purpose_first_family_wins():
    # "home" is a primary-residence keyword even though "holiday" also matches.
    assert get_purchase_purpose(Buyer(purpose="holiday home")) == "primary_residence"


def test_source_type():
    assert get_source_type(Buyer(source="Website form")) == "form"
    assert get_source_type(Buyer(source_platform="WhatsApp")) == "whatsapp"
    assert get_source_type(Buyer(source="Phone call")) == "phone"
    assert get_source_type(Buyer(source="Rightmove")) == "rightmove"
    assert get_source_type(Buyer()) == "unknown"


def test_28_day_readiness():
    assert is_28_day_ready(Buyer(ready_in_28_days=True))
    assert is_28_day_ready(Buyer(ready_within_28_days=True))
    assert is_28_day_ready(Buyer(timeline="ASAP"))
    assert is_28_day_ready(Buyer(timeline_to_purchase="within 28 days"))
    assert not is_28_day_ready(Buyer(timeline="6 months"))
    assert not is_28_day_ready(Buyer())


@pytest.mark.parametrize(
    "timeline, expected",
    [
        ("immediate", 1),
        ("1-3 months", 3),
        ("3-6 months", 6),
        ("within a year", 12),
        ("no rush", 18),
        ("4 months", None),
        (None, None),
    ],
)
def test_timeline_months(timeline, expected):
    assert get_timeline_months(Buyer(timeline=timeline)) == expected
