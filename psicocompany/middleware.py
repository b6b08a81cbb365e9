"""
FastAPI middleware binding each browser to its toast queue.
"""

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from psicocompany.config import get_settings

TOAST_COOKIE_MAX_AGE = 7 * 24 * 60 * 60


class ToastSessionMiddleware(BaseHTTPMiddleware):
    """Assign a toast session key to every browser, via cookie."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        settings = get_settings()
        session_key = request.cookies.get(settings.toast_cookie_name)
        is_new = not session_key
        if is_new:
            session_key = uuid.uuid4().hex
        request.state.toast_session = session_key

        response = await call_next(request)

        if is_new:
            response.set_cookie(
                key=settings.toast_cookie_name,
                value=session_key,
                httponly=True,
                secure=settings.cookie_secure,
                samesite="lax",
                max_age=TOAST_COOKIE_MAX_AGE,
            )
        return response
