"""
test_resolver.py
----------------
Unit tests for day and cycle numbering.
"""
from datetime import date, datetime, timedelta

import pytest

from cyclejournal.journal.data import AdjacentDirection
from cyclejournal.journal.models import JournalEntry
from cyclejournal.journal.resolver import (
    DayCycleResolver,
    adjacent_journaled_date,
    cycle_number,
    day_number,
    elapsed_days,
    previous_answer,
    question_for_day,
    start_of_day,
)
from cyclejournal.questions.data import Question


def make_entry(question_id, timestamp, answer="answer"):
    return JournalEntry(
        question_id=question_id,
        question_text=f"Question {question_id}",
        answer_text=answer,
        timestamp=timestamp,
        day_number=1,
        cycle_number=1,
    )


class TestNumbering:
    """Test day_number and cycle_number."""

    START = date(2026, 1, 1)

    def test_start_date_is_day_one_of_cycle_one(self):
        assert day_number(self.START, self.START) == 1
        assert cycle_number(self.START, self.START) == 1

    def test_last_day_of_first_cycle(self):
        target = self.START + timedelta(days=29)
        assert day_number(self.START, target) == 30
        assert cycle_number(self.START, target) == 1

    def test_cycle_wraps_after_thirty_days(self):
        target = self.START + timedelta(days=30)
        assert day_number(self.START, target) == 1
        assert cycle_number(self.START, target) == 2

    def test_sixty_days_later_is_third_cycle(self):
        target = self.START + timedelta(days=60)
        assert day_number(self.START, target) == 1
        assert cycle_number(self.START, target) == 3

    @pytest.mark.parametrize("offset", [0, 1, 29, 30, 31, 59, 365, 1000])
    def test_day_and_cycle_stay_in_range(self, offset):
        target = self.START + timedelta(days=offset)
        assert 1 <= day_number(self.START, target) <= 30
        assert cycle_number(self.START, target) == offset // 30 + 1

    def test_time_of_day_does_not_matter(self):
        late = datetime(2026, 1, 2, 23, 59, 59)
        early = datetime(2026, 1, 2, 0, 0, 1)
        assert day_number(self.START, late) == day_number(self.START, early) == 2
        assert elapsed_days(datetime(2026, 1, 1, 23, 0), early) == 1

    def test_dates_before_start_are_clamped(self):
        before = self.START - timedelta(days=5)
        assert day_number(self.START, before) == 1
        assert cycle_number(self.START, before) == 1


class TestDayCycleResolver:
    """Test DayCycleResolver positions and questions."""

    def test_position(self, day_resolver):
        position = day_resolver.position(datetime(2026, 2, 5, 8, 30))
        assert position.target_date == date(2026, 2, 5)
        assert position.elapsed_days == 35
        assert position.day_number == 6
        assert position.cycle_number == 2

    def test_position_before_start(self, day_resolver):
        position = day_resolver.position(date(2025, 12, 25))
        assert position.elapsed_days == 0
        assert position.day_number == 1

    def test_question_follows_order(self, catalog):
        reordered = list(reversed(catalog))
        resolver = DayCycleResolver(date(2026, 1, 1), reordered)
        assert resolver.question_for(date(2026, 1, 1)).id == 30
        assert resolver.question_for(date(2026, 1, 30)).id == 1
        assert resolver.question_for(date(2026, 1, 31)).id == 30

    def test_no_question_without_catalog(self):
        resolver = DayCycleResolver(date(2026, 1, 1), [])
        assert resolver.question_for(date(2026, 1, 1)) is None


class TestQuestionForDay:
    QUESTIONS = [Question(id=i, text=f"Q{i}") for i in range(1, 31)]

    def test_valid_day(self):
        assert question_for_day(self.QUESTIONS, 7).id == 7

    @pytest.mark.parametrize("day", [0, -1, 31])
    def test_out_of_range(self, day):
        assert question_for_day(self.QUESTIONS, day) is None

    def test_short_list(self):
        assert question_for_day(self.QUESTIONS[:10], 11) is None


class TestPreviousAnswer:
    """Test previous_answer selection."""

    def test_most_recent_before_date(self):
        entries = [
            make_entry(1, datetime(2026, 1, 1, 9), "first"),
            make_entry(1, datetime(2026, 1, 31, 9), "second"),
            make_entry(2, datetime(2026, 2, 1, 9), "other question"),
        ]
        entry = previous_answer(entries, 1, date(2026, 3, 2))
        assert entry.answer_text == "second"

    def test_same_day_entry_is_not_previous(self):
        entries = [make_entry(1, datetime(2026, 1, 31, 7), "today")]
        assert previous_answer(entries, 1, datetime(2026, 1, 31, 22)) is None

    def test_first_cycle_has_no_previous_answer(self):
        assert previous_answer([], 1, date(2026, 1, 1)) is None

    def test_skipped_cycle_falls_back_to_older_answer(self):
        entries = [make_entry(4, datetime(2026, 1, 4, 9), "cycle one")]
        entry = previous_answer(entries, 4, date(2026, 3, 5))
        assert entry.answer_text == "cycle one"

    def test_start_of_day(self):
        assert start_of_day(date(2026, 1, 4)) == datetime(2026, 1, 4, 0, 0)


class TestAdjacentJournaledDate:
    """Test navigation to the nearest journaled day."""

    ENTRIES = [
        make_entry(1, datetime(2026, 1, 1, 9)),
        make_entry(5, datetime(2026, 1, 5, 8)),
        make_entry(5, datetime(2026, 1, 5, 21)),
        make_entry(9, datetime(2026, 1, 9, 12)),
    ]

    def test_previous_skips_blank_days(self):
        assert adjacent_journaled_date(
            self.ENTRIES, date(2026, 1, 5), AdjacentDirection.previous
        ) == date(2026, 1, 1)

    def test_next_skips_blank_days(self):
        assert adjacent_journaled_date(
            self.ENTRIES, datetime(2026, 1, 5, 23), AdjacentDirection.next
        ) == date(2026, 1, 9)

    def test_reference_without_entry(self):
        assert adjacent_journaled_date(
            self.ENTRIES, date(2026, 1, 7), AdjacentDirection.previous
        ) == date(2026, 1, 5)

    def test_no_adjacent_date(self):
        assert (
            adjacent_journaled_date(self.ENTRIES, date(2026, 1, 1), AdjacentDirection.previous)
            is None
        )
        assert (
            adjacent_journaled_date(self.ENTRIES, date(2026, 1, 9), AdjacentDirection.next)
            is None
        )
