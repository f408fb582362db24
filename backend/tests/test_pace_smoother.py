import pytest

from shadow_race.services.pace_smoother import clamp, exponential_moving_average, smooth_target


WEEK = [2.0, 3.0, 2.5, 4.0, 3.5, 3.0, 5.0]


def test_week_of_speeds_smooths_to_expected_target():
    assert exponential_moving_average(WEEK, 0.25) == pytest.approx(3.45825, abs=1e-5)
    assert smooth_target(WEEK, alpha=0.25, min_speed=0.5, max_speed=5.0) == 3.46


def test_first_value_seeds_the_average():
    assert exponential_moving_average([4.0], 0.25) == 4.0
    assert exponential_moving_average([None, 2.0], 0.5) == 1.0


def test_empty_series_is_zero():
    assert exponential_moving_average([], 0.25) == 0.0


def test_missing_value_carries_previous_average_forward():
    assert exponential_moving_average([2.0, None, 4.0], 0.5) == 3.0


def test_order_matters():
    assert exponential_moving_average([1.0, 5.0], 0.25) != exponential_moving_average([5.0, 1.0], 0.25)


@pytest.mark.parametrize(
    "values, expected",
    [
        ([10.0, 12.0, 9.0], 5.0),
        ([0.0, 0.0, 0.1], 0.5),
        ([], 0.5),
    ],
)
def test_target_is_always_within_clamp(values, expected):
    assert smooth_target(values, alpha=0.25, min_speed=0.5, max_speed=5.0) == expected


def test_clamp():
    assert clamp(7, 0.5, 5.0) == 5.0
    assert clamp(0.1, 0.5, 5.0) == 0.5
    assert clamp(2.2, 0.5, 5.0) == 2.2
