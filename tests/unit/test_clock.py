from datetime import timedelta

import pytest

from beholder.utils.clock import format_minutes, humanize_minutes, minutes_between, parse_timestamp
from tests.conftest import T0


def test_minutes_between_is_fractional():
    assert minutes_between(T0, T0 + timedelta(minutes=5)) == 5
    assert minutes_between(T0, T0 + timedelta(seconds=90)) == 1.5


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (5.0, "5"),
        (2.5, "2.5"),
        (1 / 3, "0.33"),
        (0, "0"),
        (12.0, "12"),
    ],
)
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (0, "a few seconds"),
        (1, "a minute"),
        (2, "2 minutes"),
        (30, "30 minutes"),
        (50, "an hour"),
        (180, "3 hours"),
        (60 * 30, "a day"),
        (60 * 24 * 3, "3 days"),
        (60 * 24 * 30, "a month"),
        (60 * 24 * 400, "a year"),
        (60 * 24 * 365 * 3, "3 years"),
    ],
)
def test_humanize_minutes(minutes, expected):
    assert humanize_minutes(minutes) == expected


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (0.74, "a few seconds"),
        (0.75, "a minute"),
        (1.5, "2 minutes"),
        (44.4, "44 minutes"),
        (44.6, "an hour"),
        (21.5 * 60, "a day"),
        (25.5 * 1440, "a month"),
    ],
)
def test_humanize_rounds_before_comparing_thresholds(minutes, expected):
    assert humanize_minutes(minutes) == expected


def test_parse_timestamp_round_trip_and_garbage():
    assert parse_timestamp(T0.isoformat()) == T0
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    assert parse_timestamp("not-a-date") is None
