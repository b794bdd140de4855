"""
Preference-related data structures
"""
from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..questions.actions import DEFAULT_QUESTION_ORDER


class PreferenceKeys(Enum):
    START_DATE = "start_date"
    PASSCODE_ENABLED = "passcode_enabled"
    PASSCODE = "passcode"
    QUESTION_ORDER = "question_order"
    QUESTION_OVERRIDES = "question_overrides"


class JournalConfig(BaseModel):
    """
    Journal settings, loaded once per request and passed explicitly to the components which
    depend on them.
    """

    start_date: Optional[date] = None
    passcode_enabled: bool = False
    passcode: Optional[str] = None
    question_order: List[int] = Field(
        default_factory=lambda: list(DEFAULT_QUESTION_ORDER)
    )
    question_overrides: Dict[int, str] = Field(default_factory=dict)


class PreferencesResponse(BaseModel):
    start_date: Optional[date] = None
    passcode_enabled: bool = False
    question_order: List[int] = Field(default_factory=list)
    question_overrides: Dict[int, str] = Field(default_factory=dict)


class StartDateRequest(BaseModel):
    start_date: Optional[date] = None


class StartDateResponse(BaseModel):
    start_date: date


class PasscodeRequest(BaseModel):
    passcode: str


class PasscodeVerifyResponse(BaseModel):
    unlocked: bool
