"""
Bundled question catalog.
"""
import logging
from typing import Any, Dict, List, Optional

import toml  # type: ignore

from ..questions.data import Question
from .settings import CYCLEJOURNAL_QUESTIONS_FILE, QUESTIONS_PER_CYCLE

logger = logging.getLogger(__name__)


class CatalogDecodeError(ValueError):
    """
    Raised when the question catalog does not hold exactly one question per day of a cycle.
    """


_last_loaded_catalog: List[Question] = []


def parse_question_catalog(raw: Dict[str, Any]) -> List[Question]:
    records = raw.get("questions")
    if not isinstance(records, list):
        raise CatalogDecodeError("Catalog has no list of questions")

    questions = [
        Question(
            id=int(record["id"]),
            text=str(record["text"]),
            category=str(record.get("category", "")),
        )
        for record in records
    ]
    question_ids = {question.id for question in questions}
    if len(questions) != QUESTIONS_PER_CYCLE or question_ids != set(
        range(1, QUESTIONS_PER_CYCLE + 1)
    ):
        raise CatalogDecodeError(
            f"Catalog must contain questions 1-{QUESTIONS_PER_CYCLE} exactly once, got ids {sorted(question_ids)}"
        )

    return sorted(questions, key=lambda question: question.id)


def load_question_catalog(path: Optional[str] = None) -> List[Question]:
    """
    Loads the question catalog from a TOML file. On any read or decode failure returns the last
    catalog which loaded successfully in this process (or an empty list).
    """
    global _last_loaded_catalog

    catalog_path = path if path is not None else CYCLEJOURNAL_QUESTIONS_FILE
    try:
        raw = toml.load(catalog_path)
        catalog = parse_question_catalog(raw)
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Could not load question catalog from {catalog_path}: {repr(e)}")
        return list(_last_loaded_catalog)

    _last_loaded_catalog = catalog
    return list(catalog)


def question_catalog() -> List[Question]:
    """
    Catalog loaded once per process.
    """
    if _last_loaded_catalog:
        return list(_last_loaded_catalog)
    return load_question_catalog()
