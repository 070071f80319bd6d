"""Wall-clock helpers. "Today" is the user's calendar day, not UTC's."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_today(tz_name: str, now: datetime | None = None) -> date:
    """Calendar date of now in the given IANA timezone."""
    now = now or utc_now()
    return now.astimezone(ZoneInfo(tz_name or "UTC")).date()
