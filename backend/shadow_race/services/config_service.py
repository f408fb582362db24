"""Race configuration lookup: user row, else global row, else defaults."""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shadow_race.errors import PersistenceError
from shadow_race.models import ShadowConfig
from shadow_race.schemas import ShadowConfigSchema

logger = logging.getLogger(__name__)

DEFAULT_DIFFICULTY = "medium"

DIFFICULTY_PRESETS = {
    "easy": {
        "base_speed": 2,
        "min_speed": 1,
        "max_speed": 6,
        "adapt_up_factor": 1.1,
        "adapt_down_factor": 0.9,
        "smoothing_alpha": 0.3,
        "recovery_grace_days": 2,
        "carryover_cap": 5,
        "enabled_race": True,
        "ghost_mode_ai": False,
        "max_notifications_per_day": 8,
        "min_seconds_between_notifications": 1200,
    },
    "medium": {
        "base_speed": 3,
        "min_speed": 1,
        "max_speed": 10,
        "adapt_up_factor": 1.2,
        "adapt_down_factor": 0.85,
        "smoothing_alpha": 0.25,
        "recovery_grace_days": 1,
        "carryover_cap": 10,
        "enabled_race": True,
        "ghost_mode_ai": False,
        "max_notifications_per_day": 10,
        "min_seconds_between_notifications": 900,
    },
    "hard": {
        "base_speed": 4,
        "min_speed": 2,
        "max_speed": 12,
        "adapt_up_factor": 1.35,
        "adapt_down_factor": 0.8,
        "smoothing_alpha": 0.2,
        "recovery_grace_days": 0,
        "carryover_cap": 15,
        "enabled_race": True,
        "ghost_mode_ai": True,
        "max_notifications_per_day": 12,
        "min_seconds_between_notifications": 600,
    },
}


def normalize_difficulty(difficulty: Optional[str]) -> str:
    """Lowercased preset name; anything unknown becomes the default."""
    name = (difficulty or "").strip().lower()
    return name if name in DIFFICULTY_PRESETS else DEFAULT_DIFFICULTY


def seed_user_config(db: Session, user_id: int, difficulty: Optional[str]) -> str:
    """
    Upsert the user's own config row from a difficulty preset.

    The shadow starts at the preset's base speed. Running setup again
    overwrites the row with the new preset.
    """
    tier = normalize_difficulty(difficulty)
    preset = DIFFICULTY_PRESETS[tier]

    row = db.query(ShadowConfig).filter(ShadowConfig.user_id == user_id).first()
    if row is None:
        row = ShadowConfig(user_id=user_id)
        db.add(row)
    for field, value in preset.items():
        setattr(row, field, value)
    row.shadow_speed_target = preset["base_speed"]
    row.difficulty_tier = tier

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"could not seed config for user {user_id}") from e

    logger.info("Seeded shadow config user=%s difficulty=%s", user_id, tier)
    return tier


def resolve_config(db: Session, user_id: Optional[int]) -> ShadowConfigSchema:
    """
    Resolve the ShadowConfig for `user_id`.
    
    Read on every call so edits apply on the next invocation.
    """
    row = None
    if user_id is not None:
        row = db.query(ShadowConfig).filter(ShadowConfig.user_id == user_id).first()
    if row is None:
        row = db.query(ShadowConfig).filter(ShadowConfig.user_id.is_(None)).first()
    if row is None:
        return ShadowConfigSchema()
    
    # Null columns keep the schema defaults
    values = {
        field: getattr(row, field)
        for field in ShadowConfigSchema.model_fields
        if getattr(row, field, None) is not None
    }
    return ShadowConfigSchema(**values)


def enabled_user_ids(db: Session) -> List[int]:
    """Users with their own race-enabled config row."""
    rows = (
        db.query(ShadowConfig.user_id)
        .filter(ShadowConfig.enabled_race == True, ShadowConfig.user_id.isnot(None))
        .order_by(ShadowConfig.user_id)
        .all()
    )
    return [r[0] for r in rows]
