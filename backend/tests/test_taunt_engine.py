from datetime import date, datetime, timedelta

import pytest

from shadow_race.models import Notification, Taunt
from shadow_race.services.taunt_engine import (
    NEVER_IDLE_MINUTES,
    TauntEngine,
    TauntMetrics,
    in_random_slot,
    is_critical,
    pick_taunt_message,
)


@pytest.mark.parametrize(
    "lead, idle, critical",
    [(3.5, 0, True), (3, 0, False), (0, 120, True), (0, 119, False)],
)
def test_is_critical(lead, idle, critical):
    assert is_critical(TauntMetrics(lead_now=lead, idle_minutes=idle)) is critical


@pytest.mark.parametrize(
    "hour, minute, expected",
    [(10, 0, True), (9, 50, True), (10, 10, True), (10, 11, False), (15, 5, True), (20, 0, True), (12, 0, False)],
)
def test_in_random_slot(hour, minute, expected):
    assert in_random_slot(datetime(2024, 6, 12, hour, minute)) is expected


def test_pick_taunt_message_intensities():
    assert pick_taunt_message("critical", TauntMetrics(7, 0))[0] == "high"
    assert pick_taunt_message("critical", TauntMetrics(0, 300)) == ("high", "Shadow went on without you. Been 5h idle.")
    assert pick_taunt_message("critical", TauntMetrics(4, 0)) == ("medium", "Shadow is pulling away (4 ahead).")
    assert pick_taunt_message("critical", TauntMetrics(0, 130)) == ("medium", "It's been 130m. Ready to move?")
    assert pick_taunt_message("random", TauntMetrics(-1, 10))[0] == "low"
    assert pick_taunt_message("random", TauntMetrics(2, 10)) == ("medium", "Shadow's a step ahead already.")


@pytest.fixture
def busy_user(make_user, make_task, complete_task):
    """A UTC user who finished a task ten minutes before noon."""
    user = make_user(timezone="UTC")
    complete_task(user, make_task(user), datetime(2024, 6, 12, 11, 50))
    return user


NOON = datetime(2024, 6, 12, 12, 0)


def test_idle_user_gets_critical_taunt(db, make_user, now):
    user = make_user(timezone="UTC")

    result = TauntEngine(db).maybe_generate(user, now=now)

    assert result["created"] is True
    assert result["payload"]["kind"] == "critical"
    assert result["payload"]["metrics"]["idle_minutes"] == NEVER_IDLE_MINUTES
    taunt = db.query(Taunt).filter(Taunt.user_id == user.id).one()
    assert taunt.intensity == "high"
    assert db.query(Notification).filter(Notification.user_id == user.id).count() == 1


def test_no_trigger_outside_slots(db, busy_user):
    result = TauntEngine(db).maybe_generate(busy_user, now=NOON)
    assert result == {"created": False, "reason": "no_trigger"}
    assert db.query(Taunt).count() == 0


def test_slot_taunt_when_shadow_leads(db, busy_user, make_daily):
    make_daily(busy_user, date(2024, 6, 12), user_distance=1, shadow_distance=3)
    at_ten = datetime(2024, 6, 12, 10, 5)

    result = TauntEngine(db).maybe_generate(busy_user, now=at_ten)

    assert result["created"] is True
    assert result["payload"]["kind"] == "random"


def test_force_makes_any_moment_critical(db, busy_user):
    result = TauntEngine(db).maybe_generate(busy_user, force_critical=True, now=NOON)
    assert result["created"] is True
    assert result["payload"]["kind"] == "critical"


def test_daily_taunt_cap(db, make_user, now):
    user = make_user(timezone="UTC")
    for hours in (1, 2, 3):
        db.add(Taunt(user_id=user.id, kind="critical", intensity="low", message="m", created_at=now - timedelta(hours=hours)))
    db.commit()

    assert TauntEngine(db).maybe_generate(user, now=now) == {"created": False, "reason": "cap_reached"}


def test_limiter_blocks_taunt_and_no_row_is_written(db, make_user, make_notification, now):
    user = make_user(timezone="UTC")
    make_notification(user, created_at=now - timedelta(minutes=2))

    result = TauntEngine(db).maybe_generate(user, now=now)

    assert result == {"created": False, "reason": "rate_limit_spacing"}
    assert db.query(Taunt).count() == 0
