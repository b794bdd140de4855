import logging
from datetime import date
from typing import Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request, Response
from sqlalchemy.orm import Session

from .. import db
from . import actions
from .data import (
    PasscodeRequest,
    PasscodeVerifyResponse,
    PreferencesResponse,
    StartDateRequest,
    StartDateResponse,
)
from ..data import VersionResponse
from ..utils.settings import (
    CYCLEJOURNAL_OPENAPI_LIST,
    DOCS_TARGET_PATH,
    PASSCODE_HEADER,
)
from ..version import CYCLEJOURNAL_VERSION

SUBMODULE_NAME = "preferences"

logger = logging.getLogger(__name__)

tags_metadata = [
    {"name": "start date", "description": "Journal start date."},
    {"name": "passcode", "description": "Journal passcode lock."},
]

app = FastAPI(
    title=f"Cyclejournal {SUBMODULE_NAME} submodule",
    description="Cyclejournal API endpoints to manage journal preferences.",
    version=CYCLEJOURNAL_VERSION,
    openapi_tags=tags_metadata,
    openapi_url=f"/{DOCS_TARGET_PATH}/openapi.json"
    if SUBMODULE_NAME in CYCLEJOURNAL_OPENAPI_LIST
    else None,
    docs_url=None,
    redoc_url=f"/{DOCS_TARGET_PATH}",
)


@app.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    """
    Cyclejournal preferences submodule version.
    """
    return VersionResponse(version=CYCLEJOURNAL_VERSION)


@app.get("/", response_model=PreferencesResponse)
async def get_preferences(
    db_session: Session = Depends(db.yield_connection_from_env),
) -> PreferencesResponse:
    """
    Current journal preferences. The passcode itself is never returned.
    """
    config = actions.load_config(db_session)
    return PreferencesResponse(
        start_date=config.start_date,
        passcode_enabled=config.passcode_enabled,
        question_order=config.question_order,
        question_overrides=config.question_overrides,
    )


@app.post("/start_date", tags=["start date"], response_model=StartDateResponse)
async def set_start_date(
    start_date_request: StartDateRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> StartDateResponse:
    """
    Sets the journal start date (today by default). The start date can only be set once.
    """
    start_date = start_date_request.start_date
    if start_date is None:
        start_date = date.today()
    try:
        result = actions.set_start_date(db_session, start_date)
    except actions.StartDateLocked as e:
        raise HTTPException(status_code=409, detail=str(e))
    except actions.PreferencesUnavailable as e:
        logger.error(repr(e))
        raise HTTPException(status_code=503)
    except actions.PreferenceSaveFailed as e:
        logger.error(repr(e))
        raise HTTPException(status_code=503)
    return StartDateResponse(start_date=result)


@app.put("/passcode", tags=["passcode"], response_model=None)
async def set_passcode(
    passcode_request: PasscodeRequest = Body(...),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> Response:
    """
    Enables the passcode lock.
    """
    try:
        actions.set_passcode(db_session, passcode_request.passcode)
    except actions.InvalidPasscode as e:
        raise HTTPException(status_code=400, detail=str(e))
    except actions.PreferenceSaveFailed as e:
        logger.error(repr(e))
        raise HTTPException(status_code=503)

    return Response(status_code=200)


@app.delete("/passcode", tags=["passcode"], response_model=None)
async def disable_passcode(
    db_session: Session = Depends(db.yield_connection_from_env),
) -> Response:
    try:
        actions.disable_passcode(db_session)
    except actions.PreferenceSaveFailed as e:
        logger.error(repr(e))
        raise HTTPException(status_code=503)

    return Response(status_code=200)


@app.post("/passcode/verify", tags=["passcode"], response_model=PasscodeVerifyResponse)
async def verify_passcode(
    request: Request,
    passcode_request: Optional[PasscodeRequest] = Body(None),
    db_session: Session = Depends(db.yield_connection_from_env),
) -> PasscodeVerifyResponse:
    """
    Checks a passcode, from the request body or the passcode header.
    """
    candidate = request.headers.get(PASSCODE_HEADER)
    if passcode_request is not None:
        candidate = passcode_request.passcode
    try:
        config = actions.load_config(db_session, degrade=False)
    except actions.PreferencesUnavailable:
        raise HTTPException(status_code=503, detail="Passcode can not be checked")
    return PasscodeVerifyResponse(unlocked=actions.verify_passcode(config, candidate))
