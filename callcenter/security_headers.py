"""
Security headers for the JSON API.

Every response outside the excluded paths gets framing, sniffing, referrer,
CSP and permissions headers, plus ``no-store`` caching because responses carry
per-user schedules. HSTS is only sent in production.
"""

import logging
import os
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"

# Nothing is rendered from this origin, so everything is denied
API_CSP = "; ".join(
    [
        "default-src 'none'",
        "frame-ancestors 'none'",
        "base-uri 'none'",
        "form-action 'self'",
    ]
)

DISABLED_FEATURES = ("camera", "geolocation", "microphone", "payment", "usb")

API_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": API_CSP,
    "Permissions-Policy": ", ".join(f"{feature}=()" for feature in DISABLED_FEATURES),
}

HSTS_VALUE = "max-age=31536000; includeSubDomains; preload"
NO_STORE = "no-store, no-cache, must-revalidate"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, exclude_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.exclude_paths = tuple(exclude_paths or ())
        if IS_PRODUCTION:
            logger.info("🔒 HSTS enabled for API responses")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        if self.exclude_paths and request.url.path.startswith(self.exclude_paths):
            return response

        response.headers.update(API_HEADERS)
        if IS_PRODUCTION:
            response.headers["Strict-Transport-Security"] = HSTS_VALUE
        response.headers.setdefault("Cache-Control", NO_STORE)
        return response
