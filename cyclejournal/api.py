"""
Top-level Cyclejournal API
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .data import PingResponse, VersionResponse
from .journal.api import app as journal_api
from .middleware import PasscodeLockMiddleware
from .preferences.api import app as preferences_api
from .questions.api import app as questions_api
from .utils.settings import CORS_ALLOWED_ORIGINS, CYCLEJOURNAL_DEBUG, DOCS_PATHS
from .version import CYCLEJOURNAL_VERSION
from .widget.api import app as widget_api

LOG_LEVEL = logging.INFO
if CYCLEJOURNAL_DEBUG:
    LOG_LEVEL = logging.DEBUG

LOG_FORMAT = "[%(levelname)s] %(name)s (Source: %(pathname)s:%(lineno)d, Time: %(asctime)s) - %(message)s"
logging.basicConfig(format=LOG_FORMAT, level=LOG_LEVEL)

whitelist_paths = [
    "/ping",
    "/version",
    "/journal/version",
    "/questions/version",
    "/preferences/version",
    "/preferences/passcode/verify",
    "/widget/version",
]
whitelist_paths.extend(DOCS_PATHS)

app = FastAPI(openapi_url=None)

app.add_middleware(PasscodeLockMiddleware, whitelist=whitelist_paths)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/ping", response_model=PingResponse)
async def ping() -> PingResponse:
    return PingResponse(status="ok")


@app.get("/version", response_model=VersionResponse)
async def version() -> VersionResponse:
    return VersionResponse(version=CYCLEJOURNAL_VERSION)


app.mount("/journal", journal_api)
app.mount("/questions", questions_api)
app.mount("/preferences", preferences_api)
app.mount("/widget", widget_api)
