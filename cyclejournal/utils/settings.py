import os
from pathlib import Path
from typing import List


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


# Database
CYCLEJOURNAL_DB_URI = os.environ.get("CYCLEJOURNAL_DB_URI")
if CYCLEJOURNAL_DB_URI is None:
    raise ValueError("CYCLEJOURNAL_DB_URI environment variable not set")

CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW = os.environ.get(
    "CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS"
)
CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS = 1800
try:
    if CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW is not None:
        CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS = int(
            CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW
        )
except ValueError:
    raise ValueError(
        f"CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS must be an integer: {CYCLEJOURNAL_DB_POOL_RECYCLE_SECONDS_RAW}"
    )

CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW = os.environ.get(
    "CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS"
)
CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS = 30000
try:
    if CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW is not None:
        CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS = int(
            CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW
        )
except ValueError:
    raise ValueError(
        f"CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS must be an integer: {CYCLEJOURNAL_DB_STATEMENT_TIMEOUT_MILLIS_RAW}"
    )

CYCLEJOURNAL_DB_POOL_SIZE = 2
CYCLEJOURNAL_DB_POOL_SIZE_RAW = os.environ.get("CYCLEJOURNAL_DB_POOL_SIZE")
CYCLEJOURNAL_DB_MAX_OVERFLOW = 2
CYCLEJOURNAL_DB_MAX_OVERFLOW_RAW = os.environ.get("CYCLEJOURNAL_DB_MAX_OVERFLOW")
try:
    if CYCLEJOURNAL_DB_POOL_SIZE_RAW is not None:
        CYCLEJOURNAL_DB_POOL_SIZE = int(CYCLEJOURNAL_DB_POOL_SIZE_RAW)
except ValueError:
    raise Exception(
        f"Could not parse CYCLEJOURNAL_DB_POOL_SIZE as int: {CYCLEJOURNAL_DB_POOL_SIZE_RAW}"
    )
try:
    if CYCLEJOURNAL_DB_MAX_OVERFLOW_RAW is not None:
        CYCLEJOURNAL_DB_MAX_OVERFLOW = int(CYCLEJOURNAL_DB_MAX_OVERFLOW_RAW)
except ValueError:
    raise Exception(
        f"Could not parse CYCLEJOURNAL_DB_MAX_OVERFLOW as int: {CYCLEJOURNAL_DB_MAX_OVERFLOW_RAW}"
    )

# Journal
QUESTIONS_PER_CYCLE = 30

CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS_RAW = os.environ.get(
    "CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS"
)
CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS = 1.0
try:
    if CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS_RAW is not None:
        CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS = float(
            CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS_RAW
        )
except ValueError:
    raise ValueError(
        f"CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS must be a number: {CYCLEJOURNAL_AUTOSAVE_DELAY_SECONDS_RAW}"
    )

MODULE_PATH = Path(__file__).parent.parent.resolve()
CYCLEJOURNAL_QUESTIONS_FILE = os.environ.get(
    "CYCLEJOURNAL_QUESTIONS_FILE", str(MODULE_PATH / "questions" / "questions.toml")
)

PASSCODE_LENGTH = 4
PASSCODE_HEADER = os.environ.get("CYCLEJOURNAL_PASSCODE_HEADER", "X-Journal-Passcode")

# Widget channel
CYCLEJOURNAL_REDIS_URL = os.getenv("CYCLEJOURNAL_REDIS_URL")
CYCLEJOURNAL_REDIS_PASSWORD = os.getenv("CYCLEJOURNAL_REDIS_PASSWORD", "")
WIDGET_SUMMARY_KEY = os.getenv("CYCLEJOURNAL_WIDGET_SUMMARY_KEY", "widget:summary")

CYCLEJOURNAL_REDIS_TIMEOUT_RAW = os.environ.get("CYCLEJOURNAL_REDIS_TIMEOUT")
CYCLEJOURNAL_REDIS_TIMEOUT = 0.5
if CYCLEJOURNAL_REDIS_TIMEOUT_RAW is not None:
    try:
        CYCLEJOURNAL_REDIS_TIMEOUT = float(CYCLEJOURNAL_REDIS_TIMEOUT_RAW)
    except ValueError:
        pass

CYCLEJOURNAL_REDIS_CONNECTIONS_PER_PROCESS_RAW = os.environ.get(
    "CYCLEJOURNAL_REDIS_CONNECTIONS_PER_PROCESS"
)
CYCLEJOURNAL_REDIS_CONNECTIONS_PER_PROCESS = 10
if CYCLEJOURNAL_REDIS_CONNECTIONS_PER_PROCESS_RAW is not None:
    try:
        CYCLEJOURNAL_REDIS_CONNECTIONS_PER_PROCESS = int(
            CYCLEJOURNAL_REDIS_CONNECTIONS_PER_PROCESS_RAW
        )
    except ValueError:
        pass

# CORS
CORS_ALLOWED_ORIGINS: List[str] = os.environ.get(
    "CYCLEJOURNAL_CORS_ALLOWED_ORIGINS", "http://localhost:3000"
).split(",")

# OpenAPI
DOCS_TARGET_PATH = "docs"
CYCLEJOURNAL_OPENAPI_LIST: List[str] = []
CYCLEJOURNAL_OPENAPI_LIST_RAW = os.environ.get("CYCLEJOURNAL_OPENAPI_LIST")
if CYCLEJOURNAL_OPENAPI_LIST_RAW is not None:
    CYCLEJOURNAL_OPENAPI_LIST = CYCLEJOURNAL_OPENAPI_LIST_RAW.split(",")

DOCS_PATHS = []
for path in CYCLEJOURNAL_OPENAPI_LIST:
    DOCS_PATHS.append(f"/{path}/{DOCS_TARGET_PATH}")
    DOCS_PATHS.append(f"/{path}/{DOCS_TARGET_PATH}/openapi.json")

CYCLEJOURNAL_DEBUG = _parse_bool(os.environ.get("CYCLEJOURNAL_DEBUG", ""))
