from datetime import date, datetime, time, timedelta, timezone

from pos_analytics.core.constants import MONTH_ABBREVIATIONS


def normalize_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        parsed = parse_datetime(value_text)
        return parsed.date() if parsed is not None else None
    return None


def parse_datetime(value):
    """Parse a timestamp leniently; naive values are taken as UTC.

    Returns None for anything that cannot be read as a date or datetime.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        if value_text.endswith(("Z", "z")):
            value_text = value_text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(value_text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def day_key(moment: datetime) -> str:
    return moment.date().isoformat()


def day_label(moment) -> str:
    return "{} {:02d}".format(MONTH_ABBREVIATIONS[moment.month - 1], moment.day)


def week_key(moment: datetime) -> str:
    iso = moment.isocalendar()
    return "{}-W{:02d}".format(iso[0], iso[1])


def week_label(moment: datetime) -> str:
    return "Week {}".format(moment.isocalendar()[1])


def month_key(moment: datetime) -> str:
    return "{}-{:02d}".format(moment.year, moment.month)


def month_label(moment: datetime) -> str:
    return "{} {}".format(MONTH_ABBREVIATIONS[moment.month - 1], moment.year)


def each_day(start: date, end: date):
    if start > end:
        return []
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def _start_of_month(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=23, minute=59, second=59, microsecond=999999)


def get_date_range(period, start=None, end=None, now=None):
    """Resolve a named reporting period into a ``(start, end)`` pair.

    Unknown periods fall back to the last 30 days.
    """
    now = parse_datetime(now) or utc_now()
    start = parse_datetime(start)
    end = parse_datetime(end)
    range_end = now

    if period == "last7days":
        range_start = now - timedelta(days=7)
    elif period == "last30days":
        range_start = now - timedelta(days=30)
    elif period == "thisMonth":
        range_start = _start_of_month(now)
    elif period == "lastMonth":
        first_this_month = _start_of_month(now)
        range_end = _end_of_day(first_this_month - timedelta(days=1))
        range_start = _start_of_month(range_end)
    elif period == "thisYear":
        range_start = _start_of_month(now.replace(month=1))
    elif period == "lastYear":
        range_start = _start_of_month(now.replace(year=now.year - 1, month=1))
        range_end = _end_of_day(now.replace(year=now.year - 1, month=12, day=31))
    elif period == "custom":
        if start is not None and end is not None:
            range_start, range_end = start, end
        elif start is not None:
            range_start = start
        elif end is not None:
            range_start, range_end = end - timedelta(days=30), end
        else:
            range_start = now - timedelta(days=30)
    else:
        range_start = now - timedelta(days=30)

    return range_start, range_end


def get_previous_period_range(start, end, now=None):
    start = parse_datetime(start)
    end = parse_datetime(end)
    if start is None or end is None:
        now = parse_datetime(now) or utc_now()
        return now - timedelta(days=60), now - timedelta(days=30)
    duration = end - start
    return start - duration, start


def day_bounds(start_day: date, end_day: date):
    """Inclusive datetime bounds covering two calendar days."""
    range_start = datetime.combine(start_day, time.min, tzinfo=timezone.utc)
    range_end = datetime.combine(end_day, time.max, tzinfo=timezone.utc)
    return range_start, range_end


def resolve_day_range(start_day=None, end_day=None, *, days=30, now=None):
    """Inclusive bounds for a calendar-day filter, defaulting to the last ``days`` days."""
    now = parse_datetime(now) or utc_now()
    end_day = normalize_date(end_day) or now.date()
    start_day = normalize_date(start_day) or end_day - timedelta(days=days)
    if start_day > end_day:
        raise ValueError("start date must not be after end date")
    return day_bounds(start_day, end_day)
