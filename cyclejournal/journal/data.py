"""
Journal-related data structures
"""
import uuid
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..questions.data import Question


class AdjacentDirection(Enum):
    previous = "previous"
    next = "next"


class DayPosition(BaseModel):
    target_date: date
    day_number: int
    cycle_number: int
    elapsed_days: int


class SaveAnswerRequest(BaseModel):
    answer: str


class UpdateAnswerRequest(BaseModel):
    answer: str


class JournalEntryResponse(BaseModel):
    id: uuid.UUID
    question_id: int
    question_text: str
    answer_text: str
    timestamp: datetime
    day_number: int
    cycle_number: int
    updated_at: Optional[datetime] = None


class ListJournalEntriesResponse(BaseModel):
    entries: List[JournalEntryResponse] = Field(default_factory=list)


class TodayResponse(BaseModel):
    position: DayPosition
    question: Optional[Question] = None
    previous_answer: Optional[JournalEntryResponse] = None
    entry: Optional[JournalEntryResponse] = None
    has_journaled_today: bool = False


class AdjacentDateResponse(BaseModel):
    reference_date: date
    direction: AdjacentDirection
    journaled_date: Optional[date] = None


class CalendarMonthResponse(BaseModel):
    year: int
    month: int
    journaled_days: List[int] = Field(default_factory=list)
    entries_count: int = 0
    days_passed: int = 0
    longest_streak: int = 0
    entries: List[JournalEntryResponse] = Field(default_factory=list)
