"""Notification writes, per-user config resolution."""

from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from shadow_race.errors import PersistenceError
from shadow_race.models import Notification, ShadowConfig
from shadow_race.schemas import ShadowConfigSchema
from shadow_race.services.config_service import enabled_user_ids, resolve_config, seed_user_config
from shadow_race.services.notification_service import NotificationService
from shadow_race.timeutils import resolve_timezone


def _send(db, user, now, daily_cap=10, spacing=900):
    return NotificationService(db).send(
        user.id,
        "Shadow Taunt: Neck and neck",
        "It's close.",
        tz=resolve_timezone(user.timezone),
        daily_cap=daily_cap,
        min_spacing_seconds=spacing,
        now=now,
    )


def test_send_writes_notification(db, make_user, now):
    user = make_user()
    result = _send(db, user, now)

    assert result.sent is True
    assert result.notification.id is not None
    assert result.notification.created_at == now
    assert not result.notification.is_read


def test_daily_count_uses_users_local_day(db, make_user, make_notification, now):
    # 14:30 UTC is 20:00 in Kolkata; 18:00 UTC yesterday is the previous local day
    user = make_user(timezone="Asia/Kolkata")
    make_notification(user, created_at=datetime(2024, 6, 11, 18, 0))

    count_today, last_sent_at = NotificationService(db).history(user.id, resolve_timezone(user.timezone), now)
    assert count_today == 0
    assert last_sent_at == datetime(2024, 6, 11, 18, 0)

    assert _send(db, user, now, daily_cap=1).sent is True
    assert _send(db, user, now + timedelta(hours=1), daily_cap=1).reason == "rate_limit_daily"


def test_spacing_blocks_quick_second_send(db, make_user, now):
    user = make_user()
    assert _send(db, user, now).sent
    assert _send(db, user, now + timedelta(minutes=10)).reason == "rate_limit_spacing"
    assert _send(db, user, now + timedelta(minutes=15)).sent
    assert db.query(Notification).count() == 2


def test_mark_read_only_touches_own_notifications(db, make_user, make_notification, now):
    owner, other = make_user(), make_user()
    notification = make_notification(owner, created_at=now)
    service = NotificationService(db)

    assert service.mark_read(other.id, notification.id, now=now) is None
    read = service.mark_read(owner.id, notification.id, now=now)
    assert read.read_at == now
    assert read.is_read


def test_resolve_config_defaults(db, make_user):
    assert resolve_config(db, make_user().id) == ShadowConfigSchema()


def test_resolve_config_prefers_user_row_over_global(db, make_user, make_config):
    user, other = make_user(), make_user()
    make_config(None, base_speed=4, max_notifications_per_day=5)
    make_config(user, base_speed=2)

    assert resolve_config(db, user.id).base_speed == 2
    assert resolve_config(db, other.id).base_speed == 4
    assert resolve_config(db, other.id).max_notifications_per_day == 5


def test_resolve_config_is_not_cached(db, make_user, make_config):
    user = make_user()
    assert resolve_config(db, user.id).enabled_race is True
    make_config(user, enabled_race=False)
    assert resolve_config(db, user.id).enabled_race is False


def test_enabled_user_ids(db, make_user, make_config):
    on, off = make_user(), make_user()
    make_user()  # no config row at all
    make_config(on)
    make_config(off, enabled_race=False)
    make_config(None)

    assert enabled_user_ids(db) == [on.id]


def test_storage_failure_raises_persistence_error(db, make_user, now):
    user = make_user()
    with patch.object(db, "commit", side_effect=SQLAlchemyError("disk full")):
        with pytest.raises(PersistenceError):
            _send(db, user, now)
    assert db.query(Notification).count() == 0


def test_seed_user_config_applies_preset_and_enables_race(db, make_user):
    user = make_user()
    assert enabled_user_ids(db) == []

    assert seed_user_config(db, user.id, "Hard") == "hard"

    config = resolve_config(db, user.id)
    assert config.base_speed == 4
    assert config.shadow_speed_target == 4
    assert config.adapt_up_factor == 1.35
    assert config.recovery_grace_days == 0
    assert config.carryover_cap == 15
    assert config.ghost_mode_ai is True
    assert config.difficulty_tier == "hard"
    assert enabled_user_ids(db) == [user.id]


def test_seed_user_config_upserts_one_row(db, make_user):
    user = make_user()
    seed_user_config(db, user.id, "easy")
    assert seed_user_config(db, user.id, "nightmare") == "medium"

    assert db.query(ShadowConfig).filter(ShadowConfig.user_id == user.id).count() == 1
    config = resolve_config(db, user.id)
    assert config.base_speed == 3
    assert config.min_seconds_between_notifications == 900
    assert config.difficulty_tier == "medium"
