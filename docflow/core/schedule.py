from datetime import datetime, timedelta

FOLLOW_UP_DURATION = timedelta(hours=1)


def next_weekday_at(now: datetime, weekday: int, hour: int) -> datetime:
    """Next ``weekday`` (0=Monday) at ``hour``:00 on or after *now*.

    The result keeps *now*'s tzinfo. If *now* is exactly that instant it is
    returned unchanged. An hour that falls in a DST gap yields a wall time
    that does not exist; it is interpreted with the pre-transition offset
    (02:00 on a spring-forward Sunday in New York is 03:00 EDT).
    """
    candidate = now.replace(hour=hour, minute=0, second=0, microsecond=0)
    candidate += timedelta(days=(weekday - now.weekday()) % 7)
    if candidate < now:
        candidate += timedelta(days=7)
    return candidate


def follow_up_window(now: datetime, weekday: int, hour: int) -> tuple[datetime, datetime]:
    """Start and end of the follow-up event."""
    start = next_weekday_at(now, weekday, hour)
    return start, start + FOLLOW_UP_DURATION
