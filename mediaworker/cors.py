"""
Preflight middleware for the /api endpoints.

Every OPTIONS request under /api is answered here with an empty 200 carrying
the CORS headers, whether or not it is a well-formed preflight. Starlette's
CORSMiddleware still decorates the actual POST responses.
"""

from typing import List

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"


class PreflightMiddleware(BaseHTTPMiddleware):
    """Short-circuit OPTIONS /api/* with no body."""

    API_PREFIX = "/api/"

    def __init__(self, app, allow_origins: List[str]):
        super().__init__(app)
        self.allow_all = "*" in allow_origins
        self.allow_origins = set(allow_origins)

    def _cors_headers(self, origin: str) -> dict:
        headers = {
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        }
        if self.allow_all:
            headers["Access-Control-Allow-Origin"] = "*"
        elif origin in self.allow_origins:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        return headers

    async def dispatch(self, request: Request, call_next):
        if request.method != "OPTIONS" or not request.url.path.startswith(self.API_PREFIX):
            return await call_next(request)
        return Response(status_code=200, headers=self._cors_headers(request.headers.get("origin", "")))
