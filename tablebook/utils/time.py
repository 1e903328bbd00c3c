from datetime import date, datetime, time, timedelta

_ONE_DAY = timedelta(days=1)


def parse_date(s: str) -> date:
    """Parses a YYYY-MM-DD string."""
    return date.fromisoformat(s.strip())

def parse_time(s: str) -> time:
    """Parses HH:MM or HH:MM:SS, truncated to the minute and without any UTC offset."""
    return time.fromisoformat(s.strip()).replace(second=0, microsecond=0, tzinfo=None)

def today() -> date:
    return date.today()

def shift_time(t: time, delta: timedelta) -> time | None:
    """Moves a time-of-day by delta, or returns None when the result leaves the day."""
    offset = timedelta(hours=t.hour, minutes=t.minute, seconds=t.second, microseconds=t.microsecond) + delta
    if offset < timedelta(0) or offset >= _ONE_DAY:
        return None
    return (datetime.min + offset).time()
