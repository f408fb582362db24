"""Pydantic schemas for API request/response validation."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from datetime import datetime, date as date_type


# ============== Config Schemas ==============

class ShadowConfigSchema(BaseModel):
    """Resolved race configuration (user row, global row, or defaults)."""
    base_speed: float = 3
    min_speed: float = 0.5
    max_speed: float = 5.0
    adapt_up_factor: float = 1.2
    adapt_down_factor: float = 0.85
    smoothing_alpha: float = 0.25
    intraday_alpha: float = 0.5
    recovery_grace_days: int = 1
    carryover_cap: float = 10
    shadow_speed_target: Optional[float] = None
    enabled_race: bool = True
    ghost_mode_ai: bool = False
    max_notifications_per_day: int = 10
    min_seconds_between_notifications: int = 900
    difficulty_tier: str = "normal"

    class Config:
        from_attributes = True


class ShadowSetupRequest(BaseModel):
    difficulty: str = "medium"


class ShadowSetupResponse(BaseModel):
    ok: bool = True
    difficulty: str
    config: ShadowConfigSchema


# ============== Progress Schemas ==============

class DailyProgressResponse(BaseModel):
    date: date_type
    user_speed_avg: Optional[float] = None
    shadow_speed_target: Optional[float] = None
    user_distance: float = 0
    shadow_distance: float = 0
    lead: float = 0
    difficulty_tier: str = "normal"

    class Config:
        from_attributes = True


class ProgressDeltaResponse(BaseModel):
    # camelCase names are what the client already reads
    model_config = ConfigDict(populate_by_name=True)

    tz: str
    today: date_type
    completed_today: int = Field(serialization_alias="completedToday")
    target_today: int = Field(serialization_alias="targetToday")
    delta: int
    completed_task_ids: List[int] = Field(default_factory=list, serialization_alias="completedTaskIds")


class ProgressCommitRequest(BaseModel):
    payload: Dict[str, Any] = Field(default_factory=dict)


class ProgressCommitResponse(BaseModel):
    ok: bool = True
    day: date_type
    delta: int
    target_today: int
    completed_today: int
    decision_kind: str
    user_speed_avg: float
    payload: Dict[str, Any] = Field(default_factory=dict)


class RunTodayResponse(BaseModel):
    ok: bool = True
    decision_kind: Optional[str] = None
    delta: Optional[int] = None
    target_today: Optional[int] = None
    completed_today: Optional[int] = None
    nudged: bool = False
    reason: Optional[str] = None
    message_id: Optional[int] = None
    title: Optional[str] = None
    body: Optional[str] = None


# ============== Pace Schemas ==============

class PaceAdjustResponse(BaseModel):
    ok: bool = True
    reason: Optional[str] = None
    date: Optional[date_type] = None
    shadow_speed_target: Optional[float] = None
    recent_user_speed: Optional[float] = None


class NightlySmoothResponse(BaseModel):
    ok: bool = True
    reason: Optional[str] = None
    smoothed_target: Optional[float] = None
    latest_date: Optional[date_type] = None
    lead: Optional[float] = None
    notified: Optional[bool] = None
    blocked: Optional[str] = None


class SpeedHistoryResponse(BaseModel):
    days: int
    series: List[DailyProgressResponse]


# ============== Alignment Schemas ==============

class AlignmentLogResponse(BaseModel):
    id: int
    shadow_instance_id: int
    alignment_status: str
    recorded_at: datetime

    class Config:
        from_attributes = True


class EventCompleteResponse(BaseModel):
    ok: bool = True
    id: int
    status: str
    alignment_status: str


class HistoryResponse(BaseModel):
    days: int
    daily: List[DailyProgressResponse]
    events: List[AlignmentLogResponse]


# ============== Weekly Schemas ==============

class WeeklySummaryResponse(BaseModel):
    week_start: date_type
    week_end: date_type
    user_total: float
    shadow_total: float
    wins: int
    losses: int
    carryover: float


class WeeklyGenerateResponse(BaseModel):
    ok: bool = True
    summary: WeeklySummaryResponse


# ============== Taunt Schemas ==============

class TauntResult(BaseModel):
    created: bool
    reason: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None


# ============== Notification Schemas ==============

class NotificationResponse(BaseModel):
    id: int
    title: str
    body: str
    url: Optional[str] = None
    created_at: datetime
    read_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ============== Batch Schemas ==============

class BatchResponse(BaseModel):
    ok: bool = True
    total: int
    results: List[Dict[str, Any]]
    window: Optional[Dict[str, str]] = None
