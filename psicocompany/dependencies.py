"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import Depends, Request

from psicocompany.backend_client import (
    BackendClient,
    InMemoryBackendClient,
    SupabaseBackendClient,
)
from psicocompany.config import get_settings
from psicocompany.notifications import NotificationCenter, NotificationQueue
from psicocompany.screens import (
    LoginScreen,
    NavigationScreen,
    ProfileScreen,
    SignupScreen,
    TherapistsScreen,
)
from psicocompany.session import SessionContext, resolve_session

logger = logging.getLogger(__name__)

_backend_client: BackendClient | None = None
_notification_center: NotificationCenter | None = None


async def get_backend_client() -> BackendClient:
    """
    Return a singleton backend client so in-memory state persists across requests.
    """
    global _backend_client
    if _backend_client:
        return _backend_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.supabase_url:
        logger.info("Using the in-memory backend")
        _backend_client = InMemoryBackendClient()
    else:
        _backend_client = SupabaseBackendClient(
            url=settings.supabase_url,
            key=settings.supabase_anon_key or "",
        )
    return _backend_client


async def get_notification_center() -> NotificationCenter:
    global _notification_center
    if _notification_center:
        return _notification_center

    settings = get_settings()
    _notification_center = NotificationCenter(
        default_duration=settings.toast_default_duration
    )
    return _notification_center


async def get_notifications(
    request: Request,
    center: NotificationCenter = Depends(get_notification_center),
) -> AsyncIterator[NotificationQueue]:
    """The toast queue of the browser session making the request."""
    session_key = getattr(request.state, "toast_session", None)
    if session_key is None:
        session_key = request.cookies.get(get_settings().toast_cookie_name, "anonymous")
    with center.session(session_key) as queue:
        yield queue


async def get_session_context(
    request: Request,
    backend: BackendClient = Depends(get_backend_client),
) -> SessionContext:
    settings = get_settings()
    return await resolve_session(
        backend,
        request.cookies.get(settings.session_cookie_name),
        request.cookies.get(settings.refresh_cookie_name),
    )


def get_signup_screen(
    backend: BackendClient = Depends(get_backend_client),
    notifications: NotificationQueue = Depends(get_notifications),
) -> SignupScreen:
    return SignupScreen(backend, notifications)


def get_login_screen(
    backend: BackendClient = Depends(get_backend_client),
    notifications: NotificationQueue = Depends(get_notifications),
) -> LoginScreen:
    return LoginScreen(backend, notifications)


def get_profile_screen(
    backend: BackendClient = Depends(get_backend_client),
    notifications: NotificationQueue = Depends(get_notifications),
) -> ProfileScreen:
    return ProfileScreen(backend, notifications)


def get_therapists_screen(
    backend: BackendClient = Depends(get_backend_client),
    notifications: NotificationQueue = Depends(get_notifications),
) -> TherapistsScreen:
    return TherapistsScreen(backend, notifications)


def get_navigation_screen(
    backend: BackendClient = Depends(get_backend_client),
) -> NavigationScreen:
    return NavigationScreen(backend)
