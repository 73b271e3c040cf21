"""Local-time helpers (all spots are in Hawaii)."""

from datetime import datetime
from zoneinfo import ZoneInfo

from backend.app.models.common import TimeOfDay

HAWAII_TZ = ZoneInfo("Pacific/Honolulu")


def local_now() -> datetime:
    """Current time in Hawaii."""
    return datetime.now(HAWAII_TZ)


def time_of_day(hour: int) -> TimeOfDay:
    """Bucket an hour (0-23) into night/morning/afternoon/evening."""
    if hour < 6:
        return TimeOfDay.night
    if hour < 12:
        return TimeOfDay.morning
    if hour < 18:
        return TimeOfDay.afternoon
    if hour < 22:
        return TimeOfDay.evening
    return TimeOfDay.night
