# apps/reporting/dates.py
"""
Report date windows.

resolve_date_range() turns a duration mode plus its date inputs into a
concrete, inclusive, timezone-aware window and a display title:

- daily:   one calendar day (date required)
- weekly:  Sunday..Saturday week containing date (default today)
- monthly: calendar month containing date (default today)
- yearly:  calendar year containing date (default today)
- custom:  start_date 00:00 .. end_date 23:59:59.999999 (both required)
- period:  last N days ending today (N required, positive; starts no
           earlier than EARLIEST_DAY)

Dates are accepted in many spellings; see parse_flexible_date().
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta
from django.utils import timezone

from shared.exceptions import MalformedQuery

DURATIONS = ('daily', 'weekly', 'monthly', 'yearly', 'custom', 'period')

# Tried in order after ISO-8601 parsing fails. Day-first wins over month-first.
FALLBACK_FORMATS = [
    '%Y-%m-%d',
    '%d/%m/%Y',
    '%m/%d/%Y',
    '%d-%m-%Y',
    '%m-%d-%Y',
    '%d.%m.%Y',
    '%m.%d.%Y',
    '%Y/%m/%d',
    '%d/%m/%y',
    '%m/%d/%y',
    '%d-%m-%y',
    '%m-%d-%y',
    '%d.%m.%y',
    '%m.%d.%y',
    '%Y-%m-%d %H:%M:%S',
    '%d/%m/%Y %H:%M:%S',
    '%m/%d/%Y %H:%M:%S',
]

# Parsed dates further than this from today are rejected as typos.
REASONABLE_YEARS = 10

# Floor for open-ended "last N days" windows.
EARLIEST_DAY = date(1900, 1, 1)


@dataclass(frozen=True)
class DateRange:
    """Inclusive report window."""
    start: datetime
    end: datetime
    title: str


def _is_blank(value):
    return value is None or not str(value).strip()


def _parse_iso(value):
    try:
        return isoparse(value).date()
    except (ValueError, OverflowError):
        return None


def _parse_with_formats(value):
    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def _parse_loose_parts(value):
    """Read "15/1/2024", "1/15/2024" or "2024.1.15" style input."""
    parts = re.split(r'[/\-.]', value)
    if len(parts) != 3:
        return None
    first, second, third = parts
    interpretations = [
        (third, second, first),  # day/month/year
        (third, first, second),  # month/day/year
        (first, second, third),  # year/month/day
    ]
    for year, month, day in interpretations:
        try:
            year, month, day = int(year), int(month), int(day)
        except ValueError:
            continue
        if not (1900 <= year <= 2100 and 1 <= month <= 12 and 1 <= day <= 31):
            continue
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None


def parse_flexible_date(value, today=None):
    """
    Parse a user-supplied date string.

    Strategies, first match wins:
    1. ISO-8601 (``2024-01-15``, ``2024-01-15T10:30:00Z``)
    2. FALLBACK_FORMATS via strptime
    3. The date part of a "date time" / "dateTtime" string
    4. Three loose numeric parts, tried as d/m/y, m/d/y, then y/m/d

    Raises:
        MalformedQuery(INVALID_DATE): unparseable, or more than
        REASONABLE_YEARS away from today.

    Returns:
        datetime.date
    """
    if _is_blank(value):
        raise MalformedQuery("Date string is required", code='INVALID_DATE')

    text = str(value).strip()
    parsed = _parse_iso(text) or _parse_with_formats(text)

    if parsed is None:
        date_only = text.split(' ')[0].split('T')[0]
        if date_only != text:
            parsed = _parse_iso(date_only)

    if parsed is None:
        parsed = _parse_loose_parts(text)

    if parsed is None:
        raise MalformedQuery(
            f"Invalid date format: {value}. Supported formats: "
            "YYYY-MM-DD, DD/MM/YYYY, MM/DD/YYYY, DD-MM-YYYY, etc.",
            code='INVALID_DATE',
        )

    today = today or timezone.localdate()
    window = relativedelta(years=REASONABLE_YEARS)
    if parsed < today - window or parsed > today + window:
        raise MalformedQuery(
            f"Date {parsed:%Y-%m-%d} is not reasonable. Please enter a date within "
            f"the last {REASONABLE_YEARS} years or next {REASONABLE_YEARS} years.",
            code='INVALID_DATE',
        )
    return parsed


def start_of_day(day):
    return timezone.make_aware(datetime.combine(day, time.min))


def end_of_day(day):
    return timezone.make_aware(datetime.combine(day, time.max))


def _anchor_date(value, today):
    """Optional date input for calendar windows; defaults to today."""
    if _is_blank(value):
        return today
    return parse_flexible_date(value, today=today)


# ===== RESOLVERS =====

def _resolve_daily(today, date=None, **kwargs):
    if _is_blank(date):
        raise MalformedQuery("Date is required for daily reports", code='MISSING_DATE')
    day = parse_flexible_date(date, today=today)
    return DateRange(start_of_day(day), end_of_day(day), f"Daily Report for {day:%Y-%m-%d}")


def _resolve_weekly(today, date=None, **kwargs):
    anchor = _anchor_date(date, today)
    week_start = anchor - timedelta(days=(anchor.weekday() + 1) % 7)
    week_end = week_start + timedelta(days=6)
    return DateRange(
        start_of_day(week_start),
        end_of_day(week_end),
        f"Weekly Report ({week_start:%b %d} - {week_end:%b %d, %Y})",
    )


def _resolve_monthly(today, date=None, **kwargs):
    anchor = _anchor_date(date, today)
    month_start = anchor.replace(day=1)
    month_end = anchor + relativedelta(day=31)
    return DateRange(
        start_of_day(month_start),
        end_of_day(month_end),
        f"Monthly Report for {anchor:%B %Y}",
    )


def _resolve_yearly(today, date=None, **kwargs):
    anchor = _anchor_date(date, today)
    return DateRange(
        start_of_day(anchor.replace(month=1, day=1)),
        end_of_day(anchor.replace(month=12, day=31)),
        f"Yearly Report for {anchor:%Y}",
    )


def _resolve_custom(today, start_date=None, end_date=None, **kwargs):
    if _is_blank(start_date) or _is_blank(end_date):
        raise MalformedQuery(
            "Start date and end date are required for custom range",
            code='MISSING_DATE_RANGE',
        )
    first = parse_flexible_date(start_date, today=today)
    last = parse_flexible_date(end_date, today=today)
    return DateRange(
        start_of_day(first),
        end_of_day(last),
        f"Custom Report ({first:%Y-%m-%d} - {last:%Y-%m-%d})",
    )


def _resolve_period(today, period=None, **kwargs):
    try:
        days = int(str(period).strip())
    except (TypeError, ValueError):
        days = 0
    if days < 1:
        raise MalformedQuery("Valid period number is required", code='INVALID_PERIOD')
    # Windows reaching past EARLIEST_DAY start there.
    span = min(days - 1, (today - EARLIEST_DAY).days)
    return DateRange(
        start_of_day(today - timedelta(days=max(span, 0))),
        end_of_day(today),
        f"Last {days} Days Report",
    )


RESOLVERS = {
    'daily': _resolve_daily,
    'weekly': _resolve_weekly,
    'monthly': _resolve_monthly,
    'yearly': _resolve_yearly,
    'custom': _resolve_custom,
    'period': _resolve_period,
}


def resolve_date_range(duration, date=None, start_date=None, end_date=None, period=None, today=None):
    """
    Resolve a duration mode to a DateRange.

    Args:
        duration: One of DURATIONS
        date: Anchor date (daily: required; weekly/monthly/yearly: optional)
        start_date, end_date: Bounds for 'custom'
        period: Day count for 'period'
        today: Override for the current local date (tests)

    Raises:
        MalformedQuery: MISSING_DATE, INVALID_DATE, MISSING_DATE_RANGE,
            INVALID_PERIOD or INVALID_DURATION
    """
    resolver = RESOLVERS.get(duration)
    if resolver is None:
        raise MalformedQuery(
            f"Invalid duration. Supported: {', '.join(DURATIONS)}",
            code='INVALID_DURATION',
        )
    return resolver(
        today or timezone.localdate(),
        date=date,
        start_date=start_date,
        end_date=end_date,
        period=period,
    )
