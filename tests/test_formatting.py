import pytest

from arrest_calculator.core.formatting import format_currency, format_days, format_minutes, half_up, split_minutes
from arrest_calculator.core.types import Duration


def test_split_minutes():
    assert split_minutes(1500) == Duration(days=1, hours=1, min=0)
    assert split_minutes(59.6) == Duration(days=0, hours=1, min=0)
    assert split_minutes(-5) == Duration()


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [
        (0, "None"),
        (1, "1 minute"),
        (90, "1 hour 30 minutes"),
        (1440, "1 day"),
        (2 * 1440 + 120 + 5, "2 days 2 hours 5 minutes"),
    ],
)
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected


def test_format_days_and_currency():
    assert format_days(0) == "None"
    assert format_days(1) == "1 day"
    assert format_days(14.4) == "14 days"
    assert format_currency(1000) == "$1,000"
    assert format_currency(0) == "$0"


def test_halves_round_up_for_display():
    assert split_minutes(22.5) == Duration(min=23)
    assert format_minutes(89.5) == "1 hour 30 minutes"
    assert format_days(14.5) == "15 days"
    assert half_up(2.5) == 3
    assert half_up(-2.5) == -3
