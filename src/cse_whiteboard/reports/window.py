"""Monday-to-Sunday reporting window."""

from datetime import date, datetime, time, timedelta, timezone

from cse_whiteboard.common.exceptions import ValidationError
from cse_whiteboard.common.validation import parse_iso_date

END_OF_DAY = time(23, 59, 59, 999000)


def parse_week_ending(week_ending_date: str | date) -> date:
    if isinstance(week_ending_date, date):
        return week_ending_date
    try:
        return parse_iso_date(week_ending_date)
    except ValueError as exc:
        raise ValidationError(str(exc), field="week_ending_date") from None


def week_start(week_ending: date) -> date:
    """The Monday on or before ``week_ending``; a Sunday reaches back six days."""
    return week_ending - timedelta(days=week_ending.weekday())


def week_bounds(week_ending_date: str | date) -> tuple[datetime, datetime]:
    """Inclusive UTC bounds: Monday 00:00:00.000 through the given day 23:59:59.999."""
    end_day = parse_week_ending(week_ending_date)
    start_day = week_start(end_day)
    start = datetime.combine(start_day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(end_day, END_OF_DAY, tzinfo=timezone.utc)
    return start, end
