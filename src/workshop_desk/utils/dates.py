"""Calendar-day helpers for local, naive timestamps."""

from datetime import date, datetime, time, timedelta

from workshop_desk.utils.constants import TIMESTAMP_FORMAT


def now_local() -> datetime:
    """Current local time truncated to whole seconds."""
    return datetime.now().replace(microsecond=0)


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to local wall-clock time without tzinfo."""
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def to_timestamp(value: datetime | str | None) -> str:
    """Normalize a datetime (or ISO string) to the stored timestamp format."""
    if value is None or value == "":
        return now_local().strftime(TIMESTAMP_FORMAT)
    return parse_timestamp(value).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: datetime | str) -> datetime:
    """Parse a stored or user-supplied ISO timestamp into local naive time.

    A datetime is passed through (converted to local time if aware); any
    other non-string value raises ``TypeError``.
    """
    if isinstance(value, datetime):
        return to_local_naive(value)
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO timestamp string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_local_naive(datetime.fromisoformat(text))


def to_day(value: date | datetime | str | None) -> date:
    """Reduce a date, datetime or ISO string to its local calendar day."""
    if value is None:
        return now_local().date()
    if isinstance(value, str):
        if len(value.strip()) == 10:
            return date.fromisoformat(value.strip())
        return parse_timestamp(value).date()
    if isinstance(value, datetime):
        return to_local_naive(value).date()
    return value


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time(23, 59, 59))


def day_window(day: date) -> tuple[str, str]:
    """Inclusive [start, end] timestamp bounds for one calendar day."""
    return (
        start_of_day(day).strftime(TIMESTAMP_FORMAT),
        end_of_day(day).strftime(TIMESTAMP_FORMAT),
    )


def days_ahead(start: datetime, days: int) -> datetime:
    return start + timedelta(days=days)
