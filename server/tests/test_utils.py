from datetime import date

import pytest

from hoptrip.utils.date_helpers import expand_itinerary_dates, format_display_date, parse_display_date
from hoptrip.utils.sanitization import clean_query_text, contains_mongo_operators, split_tags


def test_expand_itinerary_dates_crosses_month_end():
    assert expand_itinerary_dates(date(2024, 2, 28), date(2024, 3, 1)) == ["2024-02-28", "2024-02-29", "2024-03-01"]


def test_display_dates_round_trip_both_formats():
    assert format_display_date(date(2024, 6, 1)) == "01 June 2024"
    assert parse_display_date("01 June 2024") == date(2024, 6, 1)
    assert parse_display_date("2024-06-01") == date(2024, 6, 1)
    with pytest.raises(ValueError):
        parse_display_date("June 1")


@pytest.mark.parametrize("payload,expected", [
    ({"tripName": "Paris"}, False),
    ({"expenses": [{"_id": "e1"}]}, False),
    ({"$where": "1"}, True),
    ({"tags": [{"$gt": ""}]}, True),
    ({"preferences.currency": "EUR"}, True),
])
def test_contains_mongo_operators(payload, expected):
    assert contains_mongo_operators(payload) is expected


def test_query_text_and_tags():
    assert clean_query_text("  par\x00is ") == "par is"
    assert clean_query_text("   ") is None
    assert split_tags("beach, food,,Paris") == ["beach", "food", "Paris"]
    assert split_tags(None) == []
