"""Allow-list CORS middleware.

Browsers enforce CORS; the client key check is the authorization boundary.
An origin outside the allow-list gets headers scoped to a fixed fallback
origin instead of a rejection, so the browser blocks the response itself.
"""

import re

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

ALLOWED_ORIGIN_PATTERNS = (
    # Local testbed, any port
    re.compile(r"^https?://localhost(:\d+)?$"),
    # Azure DevOps cloud, including region/org subdomains
    re.compile(r"^https://([a-z0-9-]+\.)?dev\.azure\.com$"),
    # Legacy visualstudio.com domain
    re.compile(r"^https://([a-z0-9-]+\.)?visualstudio\.com$"),
    # Gallery CDN serving published extension pages
    re.compile(r"^https://[a-z0-9-]+\.gallerycdn\.vsassets\.io$"),
)

ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, X-Client-Key, X-Ado-Token"


def is_origin_allowed(origin: str | None) -> bool:
    return bool(origin) and any(p.fullmatch(origin) for p in ALLOWED_ORIGIN_PATTERNS)


def cors_headers(origin: str | None, fallback_origin: str, preflight: bool = False) -> dict[str, str]:
    headers = {
        "Access-Control-Allow-Origin": origin if is_origin_allowed(origin) else fallback_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Vary": "Origin",
    }
    if preflight:
        # Private Network Access: lets secure pages call a localhost backend
        headers["Access-Control-Allow-Private-Network"] = "true"
    return headers


class CORSMiddleware(BaseHTTPMiddleware):
    """Answer preflights with 204 and stamp CORS headers on every response."""

    def __init__(self, app, fallback_origin: str = "http://localhost:3000"):
        super().__init__(app)
        self.fallback_origin = fallback_origin

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin")

        if request.method == "OPTIONS":
            return Response(
                status_code=204,
                headers=cors_headers(origin, self.fallback_origin, preflight=True),
            )

        response = await call_next(request)
        response.headers.update(cors_headers(origin, self.fallback_origin))
        return response
