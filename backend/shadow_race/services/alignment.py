"""Who is ahead: per-event alignment and the day-level lead."""

from datetime import datetime

from shadow_race.timeutils import as_aware_utc

AHEAD = "ahead"
BEHIND = "behind"
TIED = "tied"

SHADOW_AHEAD = "shadow_ahead"
USER_AHEAD = "user_ahead"
CLOSE_RACE = "close_race"

# |lead| above this switches from the close-race message to a taunt
LEAD_TAUNT_THRESHOLD = 2


def classify_alignment(now: datetime, planned_start: datetime, planned_end: datetime) -> str:
    """Shadow's standing against its own plan for one unit of work.
    
    Both boundaries are inclusive: finishing exactly at the planned start or
    end is "tied".
    """
    now = as_aware_utc(now)
    if now < as_aware_utc(planned_start):
        return AHEAD
    if now > as_aware_utc(planned_end):
        return BEHIND
    return TIED


def compute_lead(shadow_distance: float, user_distance: float) -> float:
    """Positive when the shadow leads, negative when the user leads."""
    return (shadow_distance or 0) - (user_distance or 0)


def lead_tone(lead: float) -> str:
    if lead > LEAD_TAUNT_THRESHOLD:
        return SHADOW_AHEAD
    if lead < -LEAD_TAUNT_THRESHOLD:
        return USER_AHEAD
    return CLOSE_RACE
