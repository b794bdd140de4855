import logging

from fastapi import Body, Depends, FastAPI, HTTPException, Path
from sqlalchemy.orm import Session

from .. import db
from ..data import VersionResponse
from ..journal.actions import count_answers_by_question
from ..preferences import actions as preferences_actions
from ..preferences.actions import PreferenceSaveFailed
from ..utils.confparse import question_catalog
from ..utils.settings import CYCLEJOURNAL_OPENAPI_LIST, DOCS_TARGET_PATH
from ..version import CYCLEJOURNAL_VERSION
from . import actions
from .data import (
    MoveQuestionRequest,
    OrderedQuestionsResponse,
    Question,
    QuestionAnswerCount,
    QuestionAnswerCountsResponse,
    QuestionOrderRequest,
    QuestionOrderResponse,
    QuestionTextRequest,
)

SUBMODULE_NAME = "questions"

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "questions", "description": "The 30 reflection questions."},
    {"name": "order", "description": "Order in which questions are asked."},
]

app = FastAPI(
    title=f"Cyclejournal {SUBMODULE_NAME} submodule",
    description="Cyclejournal API endpoints to customize reflection questions.",
    version=CYCLEJOURNAL_VERSION,
    openapi_tags=tags_metadata,
    openapi_url=f"/{DOCS_TARGET_PATH}/openapi.json"
    if SUBMODULE_NAME in CYCLEJOURNAL_OPENAPI_LIST
    else None,
    docs_url=None,
    redoc_url=f"/{DOCS_TARGET_PATH}",
)


def current_questions(db_session: Session) -> OrderedQuestionsResponse:
    config = preferences_actions.load_config(db_session)
    return OrderedQuestionsResponse(
        questions=actions.ordered_questions(
            question_catalog(), config.question_order, config.question_overrides
        )
    )


@app.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    """
    Cyclejournal questions submodule version.
    """
    return VersionResponse(version=CYCLEJOURNAL_VERSION)


@app.get("/", tags=["questions"], response_model=OrderedQuestionsResponse)
async def list_questions(
    db_session: Session = Depends(db.yield_connection_from_env),
) -> OrderedQuestionsResponse:
    """
    Questions in the order they are asked, with text edits applied. Empty if the question catalog
    is unavailable.
    """
    return current_questions(db_session)


@app.get("/counts", tags=["questions"], response_model=QuestionAnswerCountsResponse)
async def get_answer_counts(
    db_session: Session = Depends(db.yield_connection_from_env),
) -> QuestionAnswerCountsResponse:
    """
    Number of answers per question, in question order.
    """
    config = preferences_actions.load_config(db_session)
    counts = count_answers_by_question(db_session)
    return QuestionAnswerCountsResponse(
        counts=[
            QuestionAnswerCount(
                question_id=question_id,
                position=position,
                answers=counts.get(question_id, 0),
            )
            for position, question_id in enumerate(config.question_order, start=1)
        ]
    )


@app.put("/order", tags=["order"], response_model=QuestionOrderResponse)
async def set_order(
    order_request: QuestionOrderRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> QuestionOrderResponse:
    """
    Replaces the question order. Missing or repeated ids are filled in so the order always
    contains every question exactly once.
    """
    try:
        order = preferences_actions.set_question_order(db_session, order_request.order)
    except PreferenceSaveFailed as e:
        logger.error(repr(e))
        raise HTTPException(status_code=503)
    return QuestionOrderResponse(order=order)


@app.post("/order/move", tags=["order"], response_model=QuestionOrderResponse)
async def move_question(
    move_request: MoveQuestionRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> QuestionOrderResponse:
    try:
        order = preferences_actions.move_question(
            db_session, move_request.source, move_request.destination
        )
    except actions.InvalidQuestionMove as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PreferenceSaveFailed as e:
        logger.error(repr(e))
        raise HTTPException(status_code=503)
    return QuestionOrderResponse(order=order)


@app.delete("/order", tags=["order"], response_model=QuestionOrderResponse)
async def reset_order(
    db_session: Session = Depends(db.yield_connection_from_env),
) -> QuestionOrderResponse:
    """
    Restores the default question order.
    """
    try:
        order = preferences_actions.reset_question_order(db_session)
    except PreferenceSaveFailed as e:
        logger.error(repr(e))
        raise HTTPException(status_code=503)
    return QuestionOrderResponse(order=order)


@app.put("/{question_id}", tags=["questions"], response_model=Question)
async def update_question_text(
    question_id: int = Path(...),
    text_request: QuestionTextRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> Question:
    """
    Overrides the text of a question. Answers already given keep the wording they were given to.
    """
    try:
        preferences_actions.set_question_override(
            db_session, question_id, text_request.text
        )
    except actions.QuestionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except actions.InvalidQuestionText as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PreferenceSaveFailed as e:
        logger.error(repr(e))
        raise HTTPException(status_code=503)

    return _question_by_id(db_session, question_id)


@app.delete("/{question_id}", tags=["questions"], response_model=Question)
async def reset_question_text(
    question_id: int = Path(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> Question:
    """
    Restores the catalog text of a question.
    """
    try:
        preferences_actions.delete_question_override(db_session, question_id)
    except actions.QuestionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PreferenceSaveFailed as e:
        logger.error(repr(e))
        raise HTTPException(status_code=503)

    return _question_by_id(db_session, question_id)


def _question_by_id(db_session: Session, question_id: int) -> Question:
    for question in current_questions(db_session).questions:
        if question.id == question_id:
            return question
    raise HTTPException(status_code=503, detail="Questions are not available")
