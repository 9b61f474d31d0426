"""
Origin allow-list enforcement.

Requests without an Origin header (curl, server-to-server, mobile apps) are
always let through. Browser requests must come from an allowed origin, unless
the wildcard ``*`` is configured, which overrides the explicit list.
"""

import logging
from typing import Iterable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from config import WILDCARD_ORIGIN
from models import ErrorResponse

logger = logging.getLogger(__name__)

CORS_DENIED = ErrorResponse(error="Not allowed by CORS")

class OriginPolicy:
    """Decides whether a request's declared origin may reach the relay"""

    def __init__(self, allowed_origins: Iterable[str]):
        self.allowed_origins = frozenset(allowed_origins)
        self.allow_any = WILDCARD_ORIGIN in self.allowed_origins

    def is_allowed(self, origin: Optional[str]) -> bool:
        if not origin:
            return True
        return self.allow_any or origin in self.allowed_origins

class OriginGuardMiddleware(BaseHTTPMiddleware):
    """Reject requests from disallowed origins before they reach any route"""

    def __init__(self, app, policy: OriginPolicy):
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if not self.policy.is_allowed(origin):
            logger.warning(f"Rejected request from disallowed origin: {origin}")
            return JSONResponse(status_code=403, content=CORS_DENIED.model_dump(exclude_none=True))
        return await call_next(request)
