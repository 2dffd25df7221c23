"""
Authentication middleware for the commission API.

Rejects unauthenticated calls to protected prefixes before they reach a
router. Role checks stay in the route dependencies.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.auth.jwt import get_token_from_cookie, verify_token

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/api/commissions",)


class AuthMiddleware(BaseHTTPMiddleware):
    """401 for protected API paths without a valid token cookie."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        path = request.url.path
        if not path.startswith(PROTECTED_PREFIXES):
            return await call_next(request)

        token = get_token_from_cookie(request)
        if not token or not verify_token(token):
            logger.debug(f"Rejected unauthenticated request to {path}")
            return JSONResponse({"detail": "Not authenticated"}, status_code=401)

        return await call_next(request)
