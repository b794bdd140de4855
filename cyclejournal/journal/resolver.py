"""
Day and cycle numbering for the journal.

Every calendar date maps to a day number (1-30, which question is due) and a cycle number (which
pass through the question set the date belongs to). Numbering is anchored to the journal start
date and only depends on whole calendar days elapsed since it.
"""
from datetime import date, datetime, time
from typing import Iterable, List, Optional, TypeVar, Union

from .data import AdjacentDirection, DayPosition
from .models import JournalEntry
from ..questions.data import Question
from ..utils.settings import QUESTIONS_PER_CYCLE

DateLike = Union[date, datetime]
EntryType = TypeVar("EntryType", bound=JournalEntry)


def as_date(value: DateLike) -> date:
    # datetime is a subclass of date
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_day(value: DateLike) -> datetime:
    return datetime.combine(as_date(value), time.min)


def elapsed_days(start_date: DateLike, target_date: DateLike) -> int:
    return (as_date(target_date) - as_date(start_date)).days


def day_number(start_date: DateLike, target_date: DateLike) -> int:
    """
    Position of target_date within its cycle, from 1 to QUESTIONS_PER_CYCLE. Dates before the
    start date are clamped to day 1.
    """
    elapsed = elapsed_days(start_date, target_date)
    if elapsed < 0:
        return 1
    return (elapsed % QUESTIONS_PER_CYCLE) + 1


def cycle_number(start_date: DateLike, target_date: DateLike) -> int:
    """
    1-based cycle which target_date falls in. Dates before the start date are clamped to cycle 1.
    """
    elapsed = elapsed_days(start_date, target_date)
    if elapsed < 0:
        return 1
    return (elapsed // QUESTIONS_PER_CYCLE) + 1


def question_for_day(
    ordered_questions: List[Question], day: int
) -> Optional[Question]:
    if day < 1 or day > len(ordered_questions):
        return None
    return ordered_questions[day - 1]


def previous_answer(
    entries: Iterable[EntryType], question_id: int, before_date: DateLike
) -> Optional[EntryType]:
    """
    Most recent answer to the question strictly before the day of before_date.

    Selection is by date, not by cycle number, so it survives reordered questions and skipped
    days.
    """
    cutoff = start_of_day(before_date)
    candidates = [
        entry
        for entry in entries
        if entry.question_id == question_id and entry.timestamp < cutoff
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda entry: entry.timestamp)


def adjacent_journaled_date(
    entries: Iterable[JournalEntry],
    reference_date: DateLike,
    direction: AdjacentDirection,
) -> Optional[date]:
    """
    Nearest calendar day with an entry strictly before or after the reference day.
    """
    reference = as_date(reference_date)
    journaled_dates = {as_date(entry.timestamp) for entry in entries}

    if direction == AdjacentDirection.previous:
        earlier = [d for d in journaled_dates if d < reference]
        return max(earlier) if earlier else None

    later = [d for d in journaled_dates if d > reference]
    return min(later) if later else None


class DayCycleResolver:
    """
    Numbering and question selection for a single journal, built from its start date and its
    ordered questions.
    """

    def __init__(self, start_date: DateLike, ordered_questions: List[Question]) -> None:
        self.start_date = as_date(start_date)
        self.ordered_questions = list(ordered_questions)

    def position(self, target_date: DateLike) -> DayPosition:
        return DayPosition(
            target_date=as_date(target_date),
            day_number=day_number(self.start_date, target_date),
            cycle_number=cycle_number(self.start_date, target_date),
            elapsed_days=max(elapsed_days(self.start_date, target_date), 0),
        )

    def question_for(self, target_date: DateLike) -> Optional[Question]:
        return question_for_day(
            self.ordered_questions, day_number(self.start_date, target_date)
        )
