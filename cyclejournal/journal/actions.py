"""
Journal-related actions in Cyclejournal
"""
from datetime import date, datetime, time, timedelta
import logging
from typing import Callable, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import resolver
from .autosave import AutosaveDebouncer
from .data import (
    AdjacentDirection,
    CalendarMonthResponse,
    JournalEntryResponse,
    TodayResponse,
)
from .models import JournalEntry
from .resolver import DateLike, DayCycleResolver
from .statistics import (
    days_passed_in_month,
    journaled_days_in_month,
    longest_streak,
    month_bounds,
)
from ..preferences.data import JournalConfig
from ..questions.actions import ordered_questions
from ..questions.data import Question
from ..utils.decorators import degraded_read
from ..utils.settings import CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS

logger = logging.getLogger(__name__)


class EntryNotFound(Exception):
    """
    Raised on actions that involve journal entries which are not present in the database.
    """


class EmptyAnswer(ValueError):
    """
    Raised when an answer is empty after stripping whitespace.
    """


class EntrySaveFailed(Exception):
    """
    Raised when a journal entry could not be written. Previously saved entries are untouched and
    the write can be retried.
    """


class QuestionUnavailable(Exception):
    """
    Raised when there is no question for the requested day, for example because the question
    catalog could not be loaded.
    """


class StartDateNotSet(Exception):
    """
    Raised when a resolver is requested for a journal which has no start date yet.
    """


def entry_as_response(entry: JournalEntry) -> JournalEntryResponse:
    return JournalEntryResponse(
        id=entry.id,
        question_id=entry.question_id,
        question_text=entry.question_text,
        answer_text=entry.answer_text,
        timestamp=entry.timestamp,
        day_number=entry.day_number,
        cycle_number=entry.cycle_number,
        updated_at=entry.updated_at,
    )


def resolver_for_config(
    config: JournalConfig, catalog: List[Question]
) -> DayCycleResolver:
    if config.start_date is None:
        raise StartDateNotSet("Journal start date is not set")
    return DayCycleResolver(
        start_date=config.start_date,
        ordered_questions=ordered_questions(
            catalog, config.question_order, config.question_overrides
        ),
    )


def clean_answer(answer: str) -> str:
    answer_clean = answer.strip()
    if not answer_clean:
        raise EmptyAnswer("Answer can not be empty")
    return answer_clean


def _query_entry_for_day(db_session: Session, day: DateLike) -> Optional[JournalEntry]:
    day_start = resolver.start_of_day(day)
    return (
        db_session.query(JournalEntry)
        .filter(JournalEntry.timestamp >= day_start)
        .filter(JournalEntry.timestamp < day_start + timedelta(days=1))
        .order_by(JournalEntry.timestamp.desc())
        .first()
    )


def _query_entry_by_id(db_session: Session, entry_id: UUID) -> Optional[JournalEntry]:
    return (
        db_session.query(JournalEntry).filter(JournalEntry.id == entry_id).one_or_none()
    )


@degraded_read(lambda: None)
def get_entry(db_session: Session, entry_id: UUID) -> Optional[JournalEntry]:
    """
    Returns a journal entry by its id.
    """
    return _query_entry_by_id(db_session, entry_id)


@degraded_read(lambda: None)
def get_entry_for_day(db_session: Session, day: DateLike) -> Optional[JournalEntry]:
    """
    Returns the current entry of the calendar day, if any.
    """
    return _query_entry_for_day(db_session, day)


@degraded_read(list)
def get_entries_by_question(
    db_session: Session, question_id: int
) -> List[JournalEntry]:
    """
    Returns all answers to a question, most recent first.
    """
    return (
        db_session.query(JournalEntry)
        .filter(JournalEntry.question_id == question_id)
        .order_by(JournalEntry.timestamp.desc())
        .all()
    )


@degraded_read(list)
def get_entries_in_range(
    db_session: Session, start: DateLike, end: DateLike
) -> List[JournalEntry]:
    """
    Returns entries with start <= timestamp < end, oldest first. Dates without a time component
    are taken at the start of the day.
    """
    if not isinstance(start, datetime):
        start = resolver.start_of_day(start)
    if not isinstance(end, datetime):
        end = resolver.start_of_day(end)
    return (
        db_session.query(JournalEntry)
        .filter(JournalEntry.timestamp >= start)
        .filter(JournalEntry.timestamp < end)
        .order_by(JournalEntry.timestamp)
        .all()
    )


def get_entries_for_month(
    db_session: Session, year: int, month: int
) -> List[JournalEntry]:
    first_day, next_month_first_day = month_bounds(year, month)
    return get_entries_in_range(db_session, first_day, next_month_first_day)


@degraded_read(list)
def get_all_entries(db_session: Session) -> List[JournalEntry]:
    """
    Returns all entries, oldest first.
    """
    return db_session.query(JournalEntry).order_by(JournalEntry.timestamp).all()


@degraded_read(dict)
def count_answers_by_question(db_session: Session) -> Dict[int, int]:
    rows = (
        db_session.query(JournalEntry.question_id, func.count(JournalEntry.id))
        .group_by(JournalEntry.question_id)
        .all()
    )
    return {question_id: count for question_id, count in rows}


def previous_answer_for(
    db_session: Session, question_id: int, before_date: DateLike
) -> Optional[JournalEntry]:
    return resolver.previous_answer(
        get_entries_by_question(db_session, question_id), question_id, before_date
    )


def adjacent_journaled_date_for(
    db_session: Session, reference_date: DateLike, direction: AdjacentDirection
) -> Optional[date]:
    return resolver.adjacent_journaled_date(
        get_all_entries(db_session), reference_date, direction
    )


def save_answer(
    db_session: Session,
    day_resolver: DayCycleResolver,
    answer: str,
    now: Optional[datetime] = None,
) -> JournalEntry:
    """
    Saves the answer for the day of `now`. If the day already has an entry, that entry is updated
    instead of creating a second one.
    """
    answer_clean = clean_answer(answer)
    if now is None:
        now = datetime.now()

    question = day_resolver.question_for(now)
    if question is None:
        raise QuestionUnavailable(f"No question available for {now.date().isoformat()}")
    position = day_resolver.position(now)

    try:
        entry = _query_entry_for_day(db_session, now)
        if entry is None:
            entry = JournalEntry(
                id=uuid4(),
                question_id=question.id,
                question_text=question.text,
                answer_text=answer_clean,
                timestamp=now,
                day_number=position.day_number,
                cycle_number=position.cycle_number,
            )
            db_session.add(entry)
            logger.info(
                f"Created entry for day {position.day_number} of cycle {position.cycle_number}"
            )
        else:
            entry.answer_text = answer_clean
            entry.timestamp = now
        db_session.commit()
    except SQLAlchemyError as e:
        db_session.rollback()
        logger.error(f"Error saving journal entry: {repr(e)}")
        raise EntrySaveFailed(repr(e))

    return entry


def update_entry_answer(
    db_session: Session, entry_id: UUID, answer: str
) -> JournalEntry:
    """
    Edits the answer of an existing entry, for example from the history view. The entry keeps
    its timestamp and numbering.
    """
    answer_clean = clean_answer(answer)

    try:
        entry = _query_entry_by_id(db_session, entry_id)
        if entry is None:
            raise EntryNotFound(
                f"Could not find the journal entry with id: {str(entry_id)}"
            )
        entry.answer_text = answer_clean
        db_session.commit()
    except SQLAlchemyError as e:
        db_session.rollback()
        logger.error(f"Error updating journal entry {str(entry_id)}: {repr(e)}")
        raise EntrySaveFailed(repr(e))

    return entry


def delete_entry(db_session: Session, entry_id: UUID) -> JournalEntry:
    """
    Deletes the given journal entry.
    """
    try:
        entry = _query_entry_by_id(db_session, entry_id)
        if entry is None:
            raise EntryNotFound(
                f"Could not find the journal entry with id: {str(entry_id)}"
            )
        db_session.delete(entry)
        db_session.commit()
    except SQLAlchemyError as e:
        db_session.rollback()
        logger.error(f"Error deleting journal entry {str(entry_id)}: {repr(e)}")
        raise EntrySaveFailed(repr(e))

    return entry


def get_today(
    db_session: Session,
    day_resolver: DayCycleResolver,
    now: Optional[datetime] = None,
) -> TodayResponse:
    """
    Everything the home screen shows for a day: its position in the cycle, the question, the
    previous answer to the same question and the entry already written for the day.
    """
    if now is None:
        now = datetime.now()

    question = day_resolver.question_for(now)
    previous_entry = None
    if question is not None:
        previous_entry = previous_answer_for(db_session, question.id, now)
    entry = get_entry_for_day(db_session, now)

    return TodayResponse(
        position=day_resolver.position(now),
        question=question,
        previous_answer=entry_as_response(previous_entry)
        if previous_entry is not None
        else None,
        entry=entry_as_response(entry) if entry is not None else None,
        has_journaled_today=entry is not None,
    )


def calendar_month(
    db_session: Session, year: int, month: int, today: Optional[date] = None
) -> CalendarMonthResponse:
    if today is None:
        today = date.today()

    entries = get_entries_for_month(db_session, year, month)
    entry_dates = [entry.timestamp for entry in entries]
    return CalendarMonthResponse(
        year=year,
        month=month,
        journaled_days=sorted(journaled_days_in_month(entry_dates, year, month)),
        entries_count=len(entries),
        days_passed=days_passed_in_month(year, month, today),
        longest_streak=longest_streak(entry_dates),
        entries=[entry_as_response(entry) for entry in entries],
    )


def autosave_for_today(
    db_session: Session,
    day_resolver: DayCycleResolver,
    delay: float = CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS,
    clock: Callable[[], datetime] = datetime.now,
) -> AutosaveDebouncer:
    """
    Debouncer which saves the typed answer for the day it was opened on.

    A draft cleared to blank is not saved, the entry of the day keeps its last answer. A save
    which only happens after midnight is dated to the last moment of the day the answer was
    typed for, so it stays attached to that day's question.
    """
    journal_day = clock().date()

    def save_draft(content: str) -> None:
        if not content.strip():
            logger.debug("Skipping autosave of a blank draft")
            return
        now = clock()
        if now.date() != journal_day:
            now = datetime.combine(journal_day, time.max)
        save_answer(db_session, day_resolver, content, now=now)

    return AutosaveDebouncer(save=save_draft, delay=delay)
