"""
Question ordering policy.

The journal always works with exactly QUESTIONS_PER_CYCLE question ids, each at most once. User
customizations (a permutation of ids and per-question text overrides) are resolved against that
invariant here.
"""
import logging
from typing import Dict, Iterable, List, Optional

from .data import Question
from ..utils.settings import QUESTIONS_PER_CYCLE

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_ORDER = list(range(1, QUESTIONS_PER_CYCLE + 1))


class QuestionNotFound(Exception):
    """
    Raised on actions that involve question ids outside of the catalog range.
    """


class InvalidQuestionMove(ValueError):
    """
    Raised when a question is moved from a position which does not exist.
    """


class InvalidQuestionText(ValueError):
    """
    Raised when a question text override is empty.
    """


def ensure_question_id(question_id: int) -> int:
    if question_id < 1 or question_id > QUESTIONS_PER_CYCLE:
        raise QuestionNotFound(f"There is no question with id: {question_id}")
    return question_id


def resolve_question_order(custom_order: Optional[Iterable[int]] = None) -> List[int]:
    """
    Resolves a (possibly partial or broken) custom ordering into exactly QUESTIONS_PER_CYCLE
    unique question ids.

    Ids outside of the catalog range and repeated ids are dropped. Gaps are filled by appending
    the lowest id which is not present yet.
    """
    resolved: List[int] = []
    seen = set()
    for question_id in custom_order or []:
        if not isinstance(question_id, int) or isinstance(question_id, bool):
            continue
        if question_id < 1 or question_id > QUESTIONS_PER_CYCLE:
            continue
        if question_id in seen:
            continue
        resolved.append(question_id)
        seen.add(question_id)

    for question_id in DEFAULT_QUESTION_ORDER:
        if len(resolved) >= QUESTIONS_PER_CYCLE:
            break
        if question_id not in seen:
            resolved.append(question_id)
            seen.add(question_id)

    return resolved[:QUESTIONS_PER_CYCLE]


def move_question(
    order: Optional[Iterable[int]], source: int, destination: int
) -> List[int]:
    """
    Moves the question at position source (0-based) so it ends up at position destination.
    """
    resolved = resolve_question_order(order)
    if source < 0 or source >= len(resolved):
        raise InvalidQuestionMove(f"There is no question at position {source}")

    question_id = resolved.pop(source)
    destination = max(0, min(destination, len(resolved)))
    resolved.insert(destination, question_id)
    return resolved


def clean_question_text(text: str) -> str:
    text_clean = text.strip()
    if not text_clean:
        raise InvalidQuestionText("Question text can not be empty")
    return text_clean


def ordered_questions(
    catalog: List[Question],
    order: Optional[Iterable[int]] = None,
    overrides: Optional[Dict[int, str]] = None,
) -> List[Question]:
    """
    Materializes the ordered list of questions with text overrides applied.

    Returns an empty list if the catalog is unavailable.
    """
    if not catalog:
        return []

    questions_by_id = {question.id: question for question in catalog}
    overrides = overrides if overrides is not None else {}

    questions: List[Question] = []
    for question_id in resolve_question_order(order):
        question = questions_by_id.get(question_id)
        if question is None:
            logger.warning(f"Question {question_id} is missing from the catalog")
            continue
        override_text = overrides.get(question_id)
        if override_text:
            question = Question(
                id=question.id, text=override_text, category=question.category
            )
        questions.append(question)

    return questions
