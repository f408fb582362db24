from datetime import datetime, timedelta

import pytest

from shadow_race.services.alignment import (
    AHEAD,
    BEHIND,
    CLOSE_RACE,
    SHADOW_AHEAD,
    TIED,
    USER_AHEAD,
    classify_alignment,
    compute_lead,
    lead_tone,
)

START = datetime(2024, 6, 12, 9, 0)
END = datetime(2024, 6, 12, 10, 0)


@pytest.mark.parametrize(
    "now, expected",
    [
        (START - timedelta(seconds=1), AHEAD),
        (START, TIED),
        (START + timedelta(minutes=30), TIED),
        (END, TIED),
        (END + timedelta(seconds=1), BEHIND),
    ],
)
def test_classify_alignment_bounds_are_inclusive(now, expected):
    assert classify_alignment(now, START, END) == expected


def test_lead_is_shadow_minus_user():
    assert compute_lead(5, 2) == 3
    assert compute_lead(1, 4) == -3
    assert compute_lead(None, 2) == -2


@pytest.mark.parametrize(
    "lead, tone",
    [
        (2.01, SHADOW_AHEAD),
        (2, CLOSE_RACE),
        (0, CLOSE_RACE),
        (-2, CLOSE_RACE),
        (-2.5, USER_AHEAD),
    ],
)
def test_lead_tone(lead, tone):
    assert lead_tone(lead) == tone
