from __future__ import annotations

from datetime import datetime, timezone

NA = "N/A"


def _parse(value: datetime | str | None) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_date(value: datetime | str | None) -> str:
    dt = _parse(value)
    if dt is None:
        return NA
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def format_member_since(value: datetime | str | None) -> str:
    dt = _parse(value)
    if dt is None:
        return NA
    return f"{dt.strftime('%B')} {dt.year}"


def format_datetime(value: datetime | str | None) -> str:
    dt = _parse(value)
    if dt is None:
        return NA
    return f"{format_date(dt)} {dt.strftime('%I:%M %p')}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"


def relative_time(value: datetime | str | None, *, now: datetime | None = None) -> str:
    dt = _parse(value)
    if dt is None:
        return NA
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    minutes = int((now - dt).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")
    days = hours // 24
    if days < 7:
        return _plural(days, "day")
    return format_date(dt)
