from datetime import timedelta

import pytest

from parkpass.bookings.pricing import PriceType, calculate_cost, duration_hours
from parkpass.exceptions import InvalidDurationError
from tests.conftest import at


def test_hourly_cost_is_linear():
    assert calculate_cost(25.0, "hour", at(10), at(12)) == 50.0
    assert calculate_cost(10.0, "hour", at(10), at(11, 30)) == 15.0


def test_daily_cost_rounds_up_to_whole_days():
    assert calculate_cost(100.0, "day", at(10), at(12)) == 100.0
    assert calculate_cost(100.0, "day", at(0), at(0) + timedelta(hours=25)) == 200.0


def test_monthly_cost_rounds_up_to_whole_months():
    assert calculate_cost(500.0, "month", at(0), at(0) + timedelta(days=30)) == 500.0
    assert calculate_cost(500.0, "month", at(0), at(0) + timedelta(days=30, hours=1)) == 1000.0


@pytest.mark.parametrize("price_type", ["hour", "day", "month"])
def test_cost_is_non_negative_and_monotone(price_type):
    costs = [
        calculate_cost(12.5, price_type, at(0), at(0) + timedelta(hours=hours))
        for hours in (0.5, 1, 6, 24, 49, 800)
    ]
    assert all(cost >= 0 for cost in costs)
    assert costs == sorted(costs)


@pytest.mark.parametrize("end_offset", [timedelta(0), timedelta(hours=-1)])
def test_empty_or_inverted_window_is_rejected(end_offset):
    with pytest.raises(InvalidDurationError) as exc_info:
        calculate_cost(25.0, "hour", at(10), at(10) + end_offset)
    assert exc_info.value.status_code == 400


def test_unknown_price_type_is_rejected():
    with pytest.raises(ValueError):
        calculate_cost(25.0, "week", at(10), at(12))


def test_duration_hours_handles_fractions():
    assert duration_hours(at(10), at(10, 45)) == 0.75


def test_extension_cost_is_one_hour_at_the_spot_rate():
    assert PriceType.HOUR.extension_cost(25.0) == 25.0
    assert PriceType.DAY.extension_cost(48.0) == 2.0
    # monthly prices use the same daily divisor
    assert PriceType.MONTH.extension_cost(48.0) == 2.0


def test_hourly_rate():
    assert PriceType.DAY.hourly_rate(48.0) == 2.0
    assert PriceType.MONTH.hourly_rate(720.0) == 1.0
