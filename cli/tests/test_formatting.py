from datetime import datetime, timezone

from qc_cli.formatting import format_date, format_datetime, format_member_since, relative_time

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def test_format_date() -> None:
    assert format_date("2024-01-05T10:30:00Z") == "Jan 5, 2024"


def test_format_member_since() -> None:
    assert format_member_since("2023-11-20T00:00:00.000Z") == "November 2023"


def test_format_datetime() -> None:
    assert format_datetime("2024-01-05T14:07:00Z") == "Jan 5, 2024 02:07 PM"


def test_missing_or_invalid_dates_render_na() -> None:
    assert format_date(None) == "N/A"
    assert format_date("") == "N/A"
    assert format_datetime("not a date") == "N/A"
    assert relative_time("yesterday-ish", now=NOW) == "N/A"


def test_relative_time_buckets() -> None:
    assert relative_time("2024-03-10T11:59:30Z", now=NOW) == "Just now"
    assert relative_time("2024-03-10T11:59:00Z", now=NOW) == "1 minute ago"
    assert relative_time("2024-03-10T11:15:00Z", now=NOW) == "45 minutes ago"
    assert relative_time("2024-03-10T09:00:00Z", now=NOW) == "3 hours ago"
    assert relative_time("2024-03-09T12:00:00Z", now=NOW) == "1 day ago"
    assert relative_time("2024-02-01T12:00:00Z", now=NOW) == "Feb 1, 2024"
