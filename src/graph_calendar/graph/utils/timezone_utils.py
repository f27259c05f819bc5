"""
Calendar Time Zone Utilities

This module resolves mailbox time zones and computes the weekly calendar window:
- get_timezone: Resolve a Windows or IANA time zone name to a pytz time zone
- get_utc_start_of_week: UTC instant of the most recent Sunday midnight in a time zone
- get_week_window: UTC start and end of the current week in a time zone
- to_graph_datetime: Format a datetime for Microsoft Graph query parameters
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import pytz
from tzlocal.windows_tz import win_tz

from graph_calendar.constants import CALENDAR_SETTINGS


def get_timezone(time_zone_id: str):
    """
    Resolve a time zone identifier to a pytz time zone.

    Graph returns mailbox time zones either as Windows names
    ("Pacific Standard Time") or IANA names ("America/Los_Angeles").

    Args:
        time_zone_id: Windows or IANA time zone name

    Returns:
        pytz time zone

    Raises:
        pytz.UnknownTimeZoneError: if the name is not recognized
    """
    if not time_zone_id:
        raise pytz.UnknownTimeZoneError(time_zone_id)

    iana_name = win_tz.get(time_zone_id, time_zone_id)
    return pytz.timezone(iana_name)


def get_utc_start_of_week(today: date, time_zone_id: str) -> datetime:
    """
    Get the UTC instant of local midnight on the most recent Sunday.

    Sunday is the first day of the week. If today is Sunday the week
    starts at today's midnight.

    Args:
        today: Calendar date in the user's time zone
        time_zone_id: Windows or IANA time zone name

    Returns:
        Timezone-aware datetime in UTC
    """
    user_time_zone = get_timezone(time_zone_id)

    # date.weekday(): Monday == 0 ... Sunday == 6
    days_since_sunday = (today.weekday() + 1) % 7
    local_start = datetime.combine(today - timedelta(days=days_since_sunday), time.min)

    return user_time_zone.localize(local_start).astimezone(pytz.UTC)


def get_week_window(time_zone_id: str, today: Optional[date] = None) -> Tuple[datetime, datetime]:
    """
    Get the UTC start and end of the week containing today.

    Args:
        time_zone_id: Windows or IANA time zone name
        today: Calendar date to use; defaults to the current date in the time zone

    Returns:
        (start, end) tuple of UTC datetimes, end exactly seven days after start
    """
    if today is None:
        today = datetime.now(get_timezone(time_zone_id)).date()

    start = get_utc_start_of_week(today, time_zone_id)
    end = start + timedelta(days=CALENDAR_SETTINGS.WEEK_LENGTH_DAYS)
    return start, end


def to_graph_datetime(dt: datetime) -> str:
    """Format a datetime as UTC ISO 8601 with a Z suffix."""
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
