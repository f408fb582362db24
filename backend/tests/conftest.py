"""Shared fixtures: in-memory database, factories, and an API client."""

import os

# Must be set before shadow_race reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["GEMINI_API_KEY"] = ""
os.environ["DEFAULT_TIMEZONE"] = "Asia/Kolkata"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from shadow_race.database import Base, SessionLocal, engine, get_db
from shadow_race.main import app
from shadow_race.models import (
    DailyProgress,
    Notification,
    ShadowConfig,
    ShadowTaskInstance,
    Task,
    TaskCompletion,
    User,
)
from shadow_race.services.auth_service import AuthService

CRON_SECRET = "test-cron-secret"

# Wednesday, 14:30 UTC
NOW = datetime(2024, 6, 12, 14, 30)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(timezone="UTC", is_active=True, **kwargs):
        counter["n"] += 1
        user = User(
            email=kwargs.pop("email", f"racer{counter['n']}@example.com"),
            name=kwargs.pop("name", f"Racer {counter['n']}"),
            timezone=timezone,
            is_active=is_active,
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_task(db):
    def _make(user, owner_type="user", title="Stretch"):
        task = Task(user_id=user.id, title=title, owner_type=owner_type)
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    return _make


@pytest.fixture
def complete_task(db):
    def _complete(user, task, at):
        completion = TaskCompletion(user_id=user.id, task_id=task.id, completed_at=at)
        db.add(completion)
        db.commit()
        return completion

    return _complete


@pytest.fixture
def make_daily(db):
    def _make(user, day, user_distance=0, shadow_distance=0, **kwargs):
        row = DailyProgress(
            user_id=user.id,
            date=day,
            user_distance=user_distance,
            shadow_distance=shadow_distance,
            lead=shadow_distance - user_distance,
            **kwargs,
        )
        db.add(row)
        db.commit()
        return row

    return _make


@pytest.fixture
def make_config(db):
    def _make(user=None, **fields):
        row = ShadowConfig(user_id=user.id if user else None, **fields)
        db.add(row)
        db.commit()
        return row

    return _make


@pytest.fixture
def make_notification(db):
    def _make(user, created_at, title="Earlier", body="Earlier message"):
        row = Notification(user_id=user.id, title=title, body=body, created_at=created_at)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _make


@pytest.fixture
def make_instance(db):
    def _make(user, planned_start_at, planned_end_at):
        row = ShadowTaskInstance(
            user_id=user.id,
            planned_start_at=planned_start_at,
            planned_end_at=planned_end_at,
            planned_date_local=planned_start_at.date(),
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _make


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = AuthService.create_access_token(data={"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def cron_headers():
    return {"x-cron-secret": CRON_SECRET}
