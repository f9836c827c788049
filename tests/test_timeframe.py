from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from skyorrery.timeframe import (
    angular_distance,
    angular_separation,
    date_to_julian_day,
    epoch_millis,
    local_sidereal_time,
    normalize_degrees,
)


def _any_angle():
    return st.floats(min_value=-1e4, max_value=1e4, allow_nan=False, allow_infinity=False)


def test_julian_day_anchors():
    assert date_to_julian_day(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 2440587.5
    assert date_to_julian_day(datetime(2000, 1, 1, 12, tzinfo=timezone.utc)) == 2451545.0


def test_julian_day_respects_offsets():
    utc = datetime(2024, 4, 8, 18, 17, tzinfo=timezone.utc)
    cdt = utc.astimezone(timezone(timedelta(hours=-5)))
    assert date_to_julian_day(cdt) == date_to_julian_day(utc)


def test_naive_instant_rejected():
    with pytest.raises(ValueError):
        epoch_millis(datetime(2024, 1, 1))


def test_epoch_millis_truncates_sub_millisecond():
    t = datetime(2024, 1, 1, 0, 0, 0, 999, tzinfo=timezone.utc)
    assert epoch_millis(t) == epoch_millis(t.replace(microsecond=0))


@pytest.mark.parametrize(
    "deg, expected",
    [(0.0, 0.0), (360.0, 0.0), (-30.0, 330.0), (725.0, 5.0), (-360.0, 0.0), (359.5, 359.5)],
)
def test_normalize_degrees(deg, expected):
    assert normalize_degrees(deg) == pytest.approx(expected)


@given(_any_angle())
def test_normalize_degrees_range(deg):
    assert 0.0 <= normalize_degrees(deg) < 360.0


@given(_any_angle(), _any_angle())
def test_angular_separation_symmetric_and_bounded(a, b):
    d = angular_separation(a, b)
    assert d == angular_separation(b, a)
    assert 0.0 <= d <= 180.0


@given(_any_angle())
def test_angular_separation_zero_on_equal_input(a):
    assert angular_separation(a, a) == 0.0


def test_angular_separation_wraps_through_zero():
    assert angular_separation(350, 10) == pytest.approx(20.0)
    assert angular_separation(10, 350) == pytest.approx(20.0)
    assert angular_separation(0, 180) == 180.0
    assert angular_separation(-90, 90) == 180.0


def test_gmst_at_j2000():
    j2000 = datetime(2000, 1, 1, 12, tzinfo=timezone.utc)
    assert local_sidereal_time(j2000, 0.0) == pytest.approx(280.46061837, abs=1e-6)


@given(
    st.floats(min_value=-180.0, max_value=180.0),
    st.integers(min_value=-3, max_value=3),
)
def test_lst_periodic_in_longitude(lng, turns):
    t = datetime(2024, 4, 8, 18, 17, tzinfo=timezone.utc)
    a = local_sidereal_time(t, lng)
    b = local_sidereal_time(t, lng + 360.0 * turns)
    assert angular_separation(a, b) < 1e-7


def test_lst_shifts_with_longitude():
    t = datetime(2024, 4, 8, 0, 0, tzinfo=timezone.utc)
    greenwich = local_sidereal_time(t, 0.0)
    assert local_sidereal_time(t, 90.0) == pytest.approx(normalize_degrees(greenwich + 90.0))


def test_lst_advances_monotonically_over_a_day():
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    previous = local_sidereal_time(start, 12.5)
    total = 0.0
    for minutes in range(10, 24 * 60 + 1, 10):
        current = local_sidereal_time(start + timedelta(minutes=minutes), 12.5)
        step = normalize_degrees(current - previous)
        assert 0.0 < step < 180.0
        total += step
        previous = current
    # One solar day is slightly more than one sidereal turn.
    assert total == pytest.approx(360.98564736629, abs=1e-4)


def test_angular_distance():
    assert angular_distance(10, 0, 10, 0) == pytest.approx(0.0, abs=1e-6)
    assert angular_distance(0, 90, 123, -90) == pytest.approx(180.0)
    assert angular_distance(350, 0, 10, 0) == pytest.approx(20.0)
    # RA difference shrinks away from the equator
    assert angular_distance(0, 60, 10, 60) < 10.0
