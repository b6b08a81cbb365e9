"""
Resolve the logged-in user from session cookies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Response

from psicocompany.backend_client import AuthSession, AuthUser, BackendClient
from psicocompany.config import Settings
from psicocompany.exceptions import BackendError

logger = logging.getLogger(__name__)

REFRESH_COOKIE_MAX_AGE = 30 * 24 * 60 * 60


@dataclass
class SessionContext:
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    user: Optional[AuthUser] = None
    # Set when tokens were rotated; the response must store them.
    refreshed: Optional[AuthSession] = None
    # Set when cookies were sent but no longer resolve to a user.
    stale: bool = False

    @property
    def logged_in(self) -> bool:
        return self.user is not None


async def resolve_session(
    backend: BackendClient,
    access_token: Optional[str],
    refresh_token: Optional[str],
) -> SessionContext:
    context = SessionContext(access_token=access_token, refresh_token=refresh_token)
    try:
        if access_token:
            context.user = await backend.get_user(access_token)
        if context.user is None and refresh_token:
            refreshed = await backend.refresh_session(refresh_token)
            if refreshed is not None:
                context.user = refreshed.user
                context.access_token = refreshed.access_token
                context.refresh_token = refreshed.refresh_token
                context.refreshed = refreshed
    except BackendError as exc:
        logger.error("Failed to check the current user: %s", exc.message)
        return SessionContext()
    if context.user is None:
        context.stale = bool(access_token or refresh_token)
        context.access_token = None
        context.refresh_token = None
    return context


def set_session_cookies(
    response: Response, settings: Settings, session: AuthSession
) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.access_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=session.expires_in or 3600,
    )
    if session.refresh_token:
        response.set_cookie(
            key=settings.refresh_cookie_name,
            value=session.refresh_token,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
            max_age=REFRESH_COOKIE_MAX_AGE,
        )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.session_cookie_name)
    response.delete_cookie(settings.refresh_cookie_name)


def apply_session(response: Response, settings: Settings, context: SessionContext) -> None:
    """Persist rotated tokens, or drop cookies that no longer resolve to a user."""
    if context.refreshed is not None:
        set_session_cookies(response, settings, context.refreshed)
    elif context.stale:
        clear_session_cookies(response, settings)
