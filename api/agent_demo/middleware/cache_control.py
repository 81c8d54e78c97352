"""
Cache control middleware for API responses.

Admin and demo responses carry per-user, frequently changing data and must
never be served from a browser or proxy cache.
"""

from typing import Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

NO_STORE = "no-store, no-cache, must-revalidate, private"


class CacheControlMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add Cache-Control headers to API responses.

    Headers added to every response outside ``exempt_prefixes``:
    - Cache-Control: no-store, no-cache, must-revalidate, private
    - Pragma: no-cache (for HTTP/1.0 compatibility)
    - Expires: 0 (for HTTP/1.0 compatibility)
    """

    def __init__(self, app: ASGIApp, exempt_prefixes: Iterable[str] = ("/metrics",)):
        super().__init__(app)
        self.exempt_prefixes = tuple(exempt_prefixes)

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        if request.url.path.startswith(self.exempt_prefixes):
            return response

        response.headers["Cache-Control"] = NO_STORE
        response.headers["Pragma"] = "no-cache"
        response.headers["Expires"] = "0"
        return response
