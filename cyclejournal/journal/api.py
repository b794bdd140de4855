import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from fastapi import (
    BackgroundTasks,
    Body,
    Depends,
    FastAPI,
    HTTPException,
    Path,
    Query,
)
from sqlalchemy.orm import Session

from .. import db
from ..data import VersionResponse
from ..preferences.actions import (
    PreferenceSaveFailed,
    PreferencesUnavailable,
    StartDateLocked,
    ensure_start_date,
    load_config,
)
from ..utils.confparse import question_catalog
from ..utils.settings import (
    CYCLEJOURNAL_OPENAPI_LIST,
    DOCS_TARGET_PATH,
    QUESTIONS_PER_CYCLE,
)
from ..version import CYCLEJOURNAL_VERSION
from ..widget.actions import sync_widget_from_env
from . import actions
from .data import (
    AdjacentDateResponse,
    AdjacentDirection,
    CalendarMonthResponse,
    DayPosition,
    JournalEntryResponse,
    ListJournalEntriesResponse,
    SaveAnswerRequest,
    TodayResponse,
    UpdateAnswerRequest,
)
from .resolver import DayCycleResolver

SUBMODULE_NAME = "journal"

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "today", "description": "Question and answer of the current day."},
    {"name": "entries", "description": "Operations with journal entries."},
    {"name": "history", "description": "Browsing answers across cycles."},
]

app = FastAPI(
    title=f"Cyclejournal {SUBMODULE_NAME} submodule",
    description="Cyclejournal API endpoints to answer questions and browse journal history.",
    version=CYCLEJOURNAL_VERSION,
    openapi_tags=tags_metadata,
    openapi_url=f"/{DOCS_TARGET_PATH}/openapi.json"
    if SUBMODULE_NAME in CYCLEJOURNAL_OPENAPI_LIST
    else None,
    docs_url=None,
    redoc_url=f"/{DOCS_TARGET_PATH}",
)


def yield_resolver(
    db_session: Session = Depends(db.yield_connection_from_env),
) -> DayCycleResolver:
    """
    Resolver for the journal stored in the database. The start date is anchored to today on
    first use.
    """
    try:
        ensure_start_date(db_session, date.today())
    except (PreferenceSaveFailed, PreferencesUnavailable, StartDateLocked) as e:
        logger.error(f"Could not resolve journal start date: {repr(e)}")
        raise HTTPException(status_code=503, detail="Journal start date is not available")

    config = load_config(db_session)
    try:
        return actions.resolver_for_config(config, question_catalog())
    except actions.StartDateNotSet:
        raise HTTPException(status_code=503, detail="Journal start date is not available")


@app.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    """
    Cyclejournal journal submodule version.
    """
    return VersionResponse(version=CYCLEJOURNAL_VERSION)


@app.get("/today", tags=["today"], response_model=TodayResponse)
async def get_today(
    db_session: Session = Depends(db.yield_connection_from_env),
    day_resolver: DayCycleResolver = Depends(yield_resolver),
) -> TodayResponse:
    """
    Question of the day with the previous answer to it and the entry written today.
    """
    return actions.get_today(db_session, day_resolver)


@app.get("/position", tags=["today"], response_model=DayPosition)
async def get_position(
    target: Optional[date] = Query(None),
    day_resolver: DayCycleResolver = Depends(yield_resolver),
) -> DayPosition:
    """
    Day and cycle numbers of a date (today by default).
    """
    if target is None:
        target = date.today()
    return day_resolver.position(target)


@app.post("/entries", tags=["entries"], response_model=JournalEntryResponse)
async def save_answer(
    background_tasks: BackgroundTasks,
    save_request: SaveAnswerRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
    day_resolver: DayCycleResolver = Depends(yield_resolver),
) -> JournalEntryResponse:
    """
    Saves the answer for today. Saving again on the same day updates today's entry.
    """
    try:
        entry = actions.save_answer(db_session, day_resolver, save_request.answer)
    except actions.EmptyAnswer:
        raise HTTPException(status_code=400, detail="Answer can not be empty")
    except actions.QuestionUnavailable:
        raise HTTPException(status_code=503, detail="Questions are not available")
    except actions.EntrySaveFailed:
        raise HTTPException(status_code=503, detail="Entry was not saved, please retry")
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}")
        raise HTTPException(status_code=500)

    background_tasks.add_task(sync_widget_from_env)

    return actions.entry_as_response(entry)


@app.get("/entries", tags=["entries"], response_model=ListJournalEntriesResponse)
async def list_entries(
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> ListJournalEntriesResponse:
    """
    Entries sorted by date. Optionally limited to start <= timestamp < end.
    """
    if start is None and end is None:
        entries = actions.get_all_entries(db_session)
    else:
        entries = actions.get_entries_in_range(
            db_session,
            start if start is not None else datetime.min,
            end if end is not None else datetime.max,
        )
    return ListJournalEntriesResponse(
        entries=[actions.entry_as_response(entry) for entry in entries]
    )


@app.get("/entries/month", tags=["entries"], response_model=ListJournalEntriesResponse)
async def list_month_entries(
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> ListJournalEntriesResponse:
    """
    Entries within a calendar month.
    """
    entries = actions.get_entries_for_month(db_session, year, month)
    return ListJournalEntriesResponse(
        entries=[actions.entry_as_response(entry) for entry in entries]
    )


@app.get("/entries/{entry_id}", tags=["entries"], response_model=JournalEntryResponse)
async def get_entry(
    entry_id: UUID = Path(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> JournalEntryResponse:
    entry = actions.get_entry(db_session, entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return actions.entry_as_response(entry)


@app.put("/entries/{entry_id}", tags=["entries"], response_model=JournalEntryResponse)
async def update_entry(
    background_tasks: BackgroundTasks,
    entry_id: UUID = Path(...),
    update_request: UpdateAnswerRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> JournalEntryResponse:
    """
    Edits the answer of an entry.
    """
    try:
        entry = actions.update_entry_answer(db_session, entry_id, update_request.answer)
    except actions.EmptyAnswer:
        raise HTTPException(status_code=400, detail="Answer can not be empty")
    except actions.EntryNotFound:
        raise HTTPException(status_code=404, detail="Entry not found")
    except actions.EntrySaveFailed:
        raise HTTPException(status_code=503, detail="Entry was not saved, please retry")
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}")
        raise HTTPException(status_code=500)

    background_tasks.add_task(sync_widget_from_env)

    return actions.entry_as_response(entry)


@app.delete("/entries/{entry_id}", tags=["entries"], response_model=JournalEntryResponse)
async def delete_entry(
    background_tasks: BackgroundTasks,
    entry_id: UUID = Path(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> JournalEntryResponse:
    try:
        entry = actions.delete_entry(db_session, entry_id)
    except actions.EntryNotFound:
        raise HTTPException(status_code=404, detail="Entry not found")
    except actions.EntrySaveFailed:
        raise HTTPException(status_code=503, detail="Entry was not deleted, please retry")
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}")
        raise HTTPException(status_code=500)

    background_tasks.add_task(sync_widget_from_env)

    return actions.entry_as_response(entry)


@app.get(
    "/questions/{question_id}/entries",
    tags=["history"],
    response_model=ListJournalEntriesResponse,
)
async def list_question_entries(
    question_id: int = Path(..., ge=1, le=QUESTIONS_PER_CYCLE),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> ListJournalEntriesResponse:
    """
    All answers to a question, most recent first.
    """
    entries = actions.get_entries_by_question(db_session, question_id)
    return ListJournalEntriesResponse(
        entries=[actions.entry_as_response(entry) for entry in entries]
    )


@app.get(
    "/questions/{question_id}/previous",
    tags=["history"],
    response_model=Optional[JournalEntryResponse],
)
async def get_previous_answer(
    question_id: int = Path(..., ge=1, le=QUESTIONS_PER_CYCLE),
    before: Optional[date] = Query(None),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> Optional[JournalEntryResponse]:
    """
    Most recent answer to the question before the given date (today by default).
    """
    if before is None:
        before = date.today()
    entry = actions.previous_answer_for(db_session, question_id, before)
    if entry is None:
        return None
    return actions.entry_as_response(entry)


@app.get("/adjacent", tags=["history"], response_model=AdjacentDateResponse)
async def get_adjacent_date(
    reference: date = Query(...),
    direction: AdjacentDirection = Query(AdjacentDirection.previous),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> AdjacentDateResponse:
    """
    Nearest date with an entry before or after the reference date, skipping blank days.
    """
    return AdjacentDateResponse(
        reference_date=reference,
        direction=direction,
        journaled_date=actions.adjacent_journaled_date_for(
            db_session, reference, direction
        ),
    )


@app.get("/calendar", tags=["history"], response_model=CalendarMonthResponse)
async def get_calendar_month(
    year: int = Query(...),
    month: int = Query(..., ge=1, le=12),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> CalendarMonthResponse:
    return actions.calendar_month(db_session, year, month)
