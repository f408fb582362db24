from datetime import date, datetime, timedelta

import pytest

from shadow_race.models import SpeedSample, Task
from shadow_race.services.speed_service import SpeedAggregator, average_speed_today, speed_now


def test_completed_today_counts_only_user_owned_tasks(db, make_user, make_task, complete_task, now):
    user = make_user(timezone="UTC")
    own = make_task(user, owner_type="user")
    legacy = make_task(user, title="legacy")
    mirrored = make_task(user, owner_type="shadow")
    db.query(Task).filter(Task.id == legacy.id).update({"owner_type": None})
    db.commit()

    complete_task(user, own, now - timedelta(hours=2))
    complete_task(user, legacy, now - timedelta(hours=1))
    complete_task(user, mirrored, now - timedelta(minutes=30))

    result = SpeedAggregator(db).completed_today(user, now)

    assert result.count == 2
    assert result.task_ids == sorted([own.id, legacy.id])
    assert result.day == date(2024, 6, 12)


def test_completed_today_counts_distinct_tasks(db, make_user, make_task, complete_task, now):
    user = make_user(timezone="UTC")
    task = make_task(user)
    complete_task(user, task, now - timedelta(hours=3))
    complete_task(user, task, now - timedelta(hours=1))

    result = SpeedAggregator(db).completed_today(user, now)

    assert result.count == 1
    assert len(result.completion_times) == 2


def test_completed_today_uses_the_users_local_day(db, make_user, make_task, complete_task, now):
    # 14:30 UTC is 20:00 in Kolkata; the local day began at 18:30 UTC yesterday
    user = make_user(timezone="Asia/Kolkata")
    before_midnight = make_task(user, title="late")
    after_midnight = make_task(user, title="early")
    complete_task(user, before_midnight, datetime(2024, 6, 11, 18, 0))
    complete_task(user, after_midnight, datetime(2024, 6, 11, 19, 0))

    result = SpeedAggregator(db).completed_today(user, now)

    assert result.tz_name == "Asia/Kolkata"
    assert result.task_ids == [after_midnight.id]


def test_completed_today_ignores_other_users(db, make_user, make_task, complete_task, now):
    user, other = make_user(), make_user()
    complete_task(other, make_task(other), now - timedelta(minutes=5))

    assert SpeedAggregator(db).completed_today(user, now).count == 0


def test_speed_now_counts_last_hour(now):
    times = [now - timedelta(minutes=10), now - timedelta(minutes=59), now - timedelta(minutes=61)]
    assert speed_now(times, now) == 2


@pytest.mark.parametrize(
    "completed, elapsed, expected",
    [
        (5, timedelta(hours=10), 0.5),
        (1, timedelta(0), 60.0),
        (0, timedelta(hours=12), 0.0),
    ],
)
def test_average_speed_today(completed, elapsed, expected):
    day_start = datetime(2024, 6, 12, 0, 0)
    assert average_speed_today(completed, day_start, day_start + elapsed) == pytest.approx(expected)


def test_average_speed_today_uses_real_elapsed_time_on_dst_day(db, make_user):
    # New York skips 02:00-03:00 on 2024-03-10; 10:00 local is 9 hours in
    user = make_user(timezone="America/New_York")
    now = datetime(2024, 3, 10, 14, 0)
    completed = SpeedAggregator(db).completed_today(user, now)

    assert completed.day_start == datetime(2024, 3, 10, 5, 0)
    assert average_speed_today(9, completed.day_start, now) == pytest.approx(1.0)


def test_completed_today_skips_evening_before_a_midnight_gap(db, make_user, make_task, complete_task):
    # Santiago jumps from 00:00 to 01:00 on 2024-09-08
    user = make_user(timezone="America/Santiago")
    late = make_task(user, title="late")
    early = make_task(user, title="early")
    complete_task(user, late, datetime(2024, 9, 8, 3, 30))  # 23:30 on the 7th
    complete_task(user, early, datetime(2024, 9, 8, 4, 30))  # 01:30 on the 8th

    result = SpeedAggregator(db).completed_today(user, datetime(2024, 9, 8, 15, 0))

    assert result.day == date(2024, 9, 8)
    assert result.task_ids == [early.id]


def test_recent_speed_averages_samples_in_window(db, make_user, now):
    user = make_user()
    db.add_all([
        SpeedSample(user_id=user.id, user_speed_now=2, created_at=now - timedelta(hours=1)),
        SpeedSample(user_id=user.id, user_speed_now=4, created_at=now - timedelta(hours=5)),
        SpeedSample(user_id=user.id, user_speed_now=40, created_at=now - timedelta(hours=7)),
    ])
    db.commit()

    assert SpeedAggregator(db).recent_speed(user.id, fallback=1.0, now=now) == 3.0


def test_recent_speed_falls_back_without_samples(db, make_user, now):
    user = make_user()
    aggregator = SpeedAggregator(db)
    assert aggregator.recent_speed(user.id, fallback=1.5, now=now) == 1.5
    assert aggregator.recent_speed(user.id, fallback=None, now=now) == 0.0
