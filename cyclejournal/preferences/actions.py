import hmac
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .data import JournalConfig, PreferenceKeys
from .models import Preference
from ..questions.actions import (
    DEFAULT_QUESTION_ORDER,
    clean_question_text,
    ensure_question_id,
    move_question as move_question_in_order,
    resolve_question_order,
)
from ..utils.settings import PASSCODE_LENGTH

logger = logging.getLogger(__name__)


class PreferenceSaveFailed(Exception):
    """
    Raised when a preference could not be written to the database.
    """


class StartDateLocked(Exception):
    """
    Raised on attempts to change the journal start date after it was set.
    """


class PreferencesUnavailable(Exception):
    """
    Raised when preferences could not be read and the caller can not fall back to defaults.
    """


class InvalidPasscode(ValueError):
    """
    Raised when a passcode is not made of exactly PASSCODE_LENGTH digits.
    """


def preference_get(session: Session, key: PreferenceKeys) -> Optional[Preference]:
    return session.query(Preference).filter(Preference.key == key.value).one_or_none()


def preference_upsert(session: Session, key: PreferenceKeys, value: Any) -> None:
    try:
        current_preference = preference_get(session, key)
        if current_preference is None:
            session.add(Preference(key=key.value, value=value))
        else:
            current_preference.value = value
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PreferenceSaveFailed(repr(e))


def preference_delete(session: Session, key: PreferenceKeys) -> None:
    try:
        preference = preference_get(session, key)
        if preference is None:
            return
        session.delete(preference)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise PreferenceSaveFailed(repr(e))


def load_config(session: Session, degrade: bool = True) -> JournalConfig:
    """
    Reads all preferences into a JournalConfig. A failed read degrades to default settings, or
    raises PreferencesUnavailable if degrade is False.
    """
    try:
        preferences = session.query(Preference).all()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error loading preferences: {repr(e)}")
        if not degrade:
            raise PreferencesUnavailable(repr(e))
        return JournalConfig()

    values: Dict[str, Any] = {
        preference.key: preference.value for preference in preferences
    }

    start_date: Optional[date] = None
    start_date_raw = values.get(PreferenceKeys.START_DATE.value)
    if start_date_raw is not None:
        try:
            start_date = date.fromisoformat(start_date_raw)
        except (TypeError, ValueError):
            logger.error(f"Stored start date is not an ISO date: {start_date_raw}")

    question_overrides: Dict[int, str] = {}
    question_overrides_raw = values.get(PreferenceKeys.QUESTION_OVERRIDES.value)
    if question_overrides_raw is not None and not isinstance(
        question_overrides_raw, dict
    ):
        logger.error(
            f"Stored question overrides are not a mapping: {question_overrides_raw}"
        )
        question_overrides_raw = None
    for question_id_raw, text in (question_overrides_raw or {}).items():
        if not isinstance(text, str) or not text.strip():
            continue
        try:
            question_overrides[int(question_id_raw)] = text
        except ValueError:
            logger.warning(f"Skipping override for unknown question {question_id_raw}")

    passcode = values.get(PreferenceKeys.PASSCODE.value)
    return JournalConfig(
        start_date=start_date,
        passcode_enabled=bool(values.get(PreferenceKeys.PASSCODE_ENABLED.value, False))
        and bool(passcode),
        passcode=passcode,
        question_order=resolve_question_order(
            values.get(PreferenceKeys.QUESTION_ORDER.value)
        ),
        question_overrides=question_overrides,
    )


def set_start_date(session: Session, start_date: date) -> date:
    """
    Sets the journal start date. The start date can only be set once, a stored value which can
    not be read is never overwritten.
    """
    current = load_config(session, degrade=False).start_date
    if current is not None:
        if current != start_date:
            raise StartDateLocked(f"Journal start date is already set to {current}")
        return current

    try:
        stored = preference_get(session, PreferenceKeys.START_DATE)
    except SQLAlchemyError as e:
        session.rollback()
        raise PreferencesUnavailable(repr(e))
    if stored is not None:
        raise StartDateLocked(
            f"Stored journal start date can not be read: {stored.value}"
        )

    preference_upsert(session, PreferenceKeys.START_DATE, start_date.isoformat())
    logger.info(f"Journal start date set to {start_date.isoformat()}")
    return start_date


def ensure_start_date(session: Session, today: date) -> date:
    """
    Returns the journal start date, anchoring it to today on first use.
    """
    current = load_config(session, degrade=False).start_date
    if current is not None:
        return current
    return set_start_date(session, today)


def set_question_order(session: Session, order: List[int]) -> List[int]:
    resolved_order = resolve_question_order(order)
    preference_upsert(session, PreferenceKeys.QUESTION_ORDER, resolved_order)
    return resolved_order


def move_question(session: Session, source: int, destination: int) -> List[int]:
    config = load_config(session)
    new_order = move_question_in_order(config.question_order, source, destination)
    preference_upsert(session, PreferenceKeys.QUESTION_ORDER, new_order)
    return new_order


def reset_question_order(session: Session) -> List[int]:
    preference_delete(session, PreferenceKeys.QUESTION_ORDER)
    return list(DEFAULT_QUESTION_ORDER)


def set_question_override(session: Session, question_id: int, text: str) -> Dict[int, str]:
    ensure_question_id(question_id)
    text_clean = clean_question_text(text)

    overrides = dict(load_config(session).question_overrides)
    overrides[question_id] = text_clean
    preference_upsert(
        session,
        PreferenceKeys.QUESTION_OVERRIDES,
        {str(key): value for key, value in overrides.items()},
    )
    return overrides


def delete_question_override(session: Session, question_id: int) -> Dict[int, str]:
    ensure_question_id(question_id)

    overrides = dict(load_config(session).question_overrides)
    if overrides.pop(question_id, None) is None:
        return overrides
    preference_upsert(
        session,
        PreferenceKeys.QUESTION_OVERRIDES,
        {str(key): value for key, value in overrides.items()},
    )
    return overrides


def set_passcode(session: Session, passcode: str) -> None:
    if len(passcode) != PASSCODE_LENGTH or not passcode.isdigit():
        raise InvalidPasscode(f"Passcode must be {PASSCODE_LENGTH} digits")
    preference_upsert(session, PreferenceKeys.PASSCODE, passcode)
    preference_upsert(session, PreferenceKeys.PASSCODE_ENABLED, True)


def disable_passcode(session: Session) -> None:
    preference_upsert(session, PreferenceKeys.PASSCODE_ENABLED, False)
    preference_delete(session, PreferenceKeys.PASSCODE)


def verify_passcode(config: JournalConfig, candidate: Optional[str]) -> bool:
    """
    Returns True if the journal is unlocked by the candidate passcode (or is not locked at all).
    """
    if not config.passcode_enabled or not config.passcode:
        return True
    if candidate is None:
        return False
    return hmac.compare_digest(candidate.encode(), config.passcode.encode())
