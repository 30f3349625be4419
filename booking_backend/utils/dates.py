from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(value: str | datetime) -> datetime:
    """Parse an ISO-8601 string or datetime into an aware UTC datetime.

    Naive values are read as local time, the way a browser reads the value of a
    datetime-local input. Raises ValueError for anything unparseable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        candidate = value.strip()
        if candidate.endswith(('Z', 'z')):
            candidate = candidate[:-1] + '+00:00'
        parsed = datetime.fromisoformat(candidate)
    else:
        raise ValueError(f'Unsupported datetime value: {value!r}')

    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed.astimezone(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands timezone-aware columns back naive; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_date(value: datetime) -> str:
    """e.g. ``Mon, 5 Jan 2026`` in the viewer's local time."""
    value = value.astimezone()
    return f'{value:%a}, {value.day} {value:%b %Y}'


def format_time(value: datetime) -> str:
    """e.g. ``09:30 am`` in the viewer's local time."""
    value = value.astimezone()
    return f'{value:%I:%M} {"am" if value.hour < 12 else "pm"}'
