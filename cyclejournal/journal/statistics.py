"""
Journal statistics for the calendar and widget views.
"""
import calendar
from datetime import date, timedelta
from typing import Dict, Iterable, Set, Tuple

from .resolver import DateLike, as_date


def current_streak(entry_dates: Iterable[DateLike], today: DateLike) -> int:
    """
    Number of consecutive journaled days ending today. A streak which ended yesterday is still
    current, today's entry may not be written yet.
    """
    journaled = {as_date(d) for d in entry_dates}
    check_date = as_date(today)
    if check_date not in journaled:
        check_date = check_date - timedelta(days=1)
        if check_date not in journaled:
            return 0

    streak = 0
    while check_date in journaled:
        streak += 1
        check_date = check_date - timedelta(days=1)
    return streak


def longest_streak(entry_dates: Iterable[DateLike]) -> int:
    days = sorted({as_date(d) for d in entry_dates})
    if not days:
        return 0

    best = 1
    run = 1
    for previous_day, day in zip(days, days[1:]):
        if (day - previous_day).days == 1:
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def monthly_entry_counts(entry_dates: Iterable[DateLike]) -> Dict[str, int]:
    """
    Number of entries per "YYYY-MM" month key.
    """
    counts: Dict[str, int] = {}
    for entry_date in entry_dates:
        month_key = as_date(entry_date).strftime("%Y-%m")
        counts[month_key] = counts.get(month_key, 0) + 1
    return counts


def journaled_days_in_month(
    entry_dates: Iterable[DateLike], year: int, month: int
) -> Set[int]:
    return {
        d.day
        for d in (as_date(entry_date) for entry_date in entry_dates)
        if d.year == year and d.month == month
    }


def days_passed_in_month(year: int, month: int, today: DateLike) -> int:
    today = as_date(today)
    if (today.year, today.month) == (year, month):
        return today.day
    if (year, month) < (today.year, today.month):
        return calendar.monthrange(year, month)[1]
    return 0


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """
    First day of the month and first day of the following month.
    """
    first_day = date(year, month, 1)
    if month == 12:
        return first_day, date(year + 1, 1, 1)
    return first_day, date(year, month + 1, 1)
