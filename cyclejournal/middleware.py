import logging
from typing import Awaitable, Callable, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from . import db
from .preferences.actions import PreferencesUnavailable, load_config, verify_passcode
from .utils.settings import PASSCODE_HEADER

logger = logging.getLogger(__name__)


class PasscodeLockMiddleware(BaseHTTPMiddleware):
    """
    Checks the passcode header on the request when the journal is locked with a passcode.
    Requests to whitelisted paths pass through, otherwise a wrong or missing passcode is
    answered with 403.
    """

    def __init__(self, app, whitelist: Optional[List[str]] = None):
        self.whitelist: List[str] = []
        if whitelist is not None:
            self.whitelist = whitelist
        super().__init__(app)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        if request.url.path in self.whitelist or request.method == "OPTIONS":
            return await call_next(request)

        try:
            with db.yield_connection_from_env_ctx() as db_session:
                config = load_config(db_session, degrade=False)
        except PreferencesUnavailable:
            logger.error(f"Passcode lock could not be checked: {request.url.path}")
            return Response(status_code=503, content="Journal lock is unavailable")

        if not verify_passcode(config, request.headers.get(PASSCODE_HEADER)):
            logger.warning(f"Locked journal request rejected: {request.url.path}")
            return Response(status_code=403, content="Journal is locked")

        return await call_next(request)
