import logging

from fastapi import Depends, FastAPI
from sqlalchemy.orm import Session

from .. import db
from ..data import VersionResponse
from ..utils.settings import CYCLEJOURNAL_OPENAPI_LIST, DOCS_TARGET_PATH
from ..version import CYCLEJOURNAL_VERSION
from . import actions
from .data import SummarySnapshot

SUBMODULE_NAME = "widget"

logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"Cyclejournal {SUBMODULE_NAME} submodule",
    description="Cyclejournal API endpoints for the home screen widget summary.",
    version=CYCLEJOURNAL_VERSION,
    openapi_url=f"/{DOCS_TARGET_PATH}/openapi.json"
    if SUBMODULE_NAME in CYCLEJOURNAL_OPENAPI_LIST
    else None,
    docs_url=None,
    redoc_url=f"/{DOCS_TARGET_PATH}",
)


@app.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    """
    Cyclejournal widget submodule version.
    """
    return VersionResponse(version=CYCLEJOURNAL_VERSION)


@app.get("/summary", response_model=SummarySnapshot)
async def get_summary(
    db_session: Session = Depends(db.yield_connection_from_env),
) -> SummarySnapshot:
    """
    Exports the widget summary and publishes it to the widget channel.
    """
    return actions.sync_widget(db_session)
