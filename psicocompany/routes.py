"""
JSON API routes used by the pages' scripts.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from psicocompany.config import get_settings
from psicocompany.dependencies import (
    get_navigation_screen,
    get_notifications,
    get_session_context,
    get_therapists_screen,
)
from psicocompany.notifications import NotificationQueue
from psicocompany.pages import toast_views
from psicocompany.schemas import (
    EnqueueNotificationRequest,
    NavigationState,
    NotificationOut,
    SignupValidationRequest,
    SignupValidationResponse,
    TherapistListResponse,
)
from psicocompany.screens import NavigationScreen, TherapistsScreen
from psicocompany.screens.signup import validate_signup, validate_signup_field
from psicocompany.session import SessionContext, apply_session

router = APIRouter()


@router.get("/notifications", response_model=list[NotificationOut])
async def list_notifications(notifications: NotificationQueue = Depends(get_notifications)):
    return toast_views(notifications)


@router.post("/notifications", status_code=204)
async def enqueue_notification(
    payload: EnqueueNotificationRequest,
    notifications: NotificationQueue = Depends(get_notifications),
):
    """Show a toast for the calling browser."""
    notifications.enqueue(payload.message, payload.severity, payload.duration)
    return Response(status_code=204)


@router.delete("/notifications/{notification_id}", status_code=204)
async def dismiss_notification(
    notification_id: int,
    notifications: NotificationQueue = Depends(get_notifications),
):
    # Unknown ids are not an error.
    notifications.dismiss(notification_id)
    return Response(status_code=204)


@router.get("/navigation", response_model=NavigationState)
async def navigation_state(
    response: Response,
    path: str = Query("/", max_length=256),
    context: SessionContext = Depends(get_session_context),
    screen: NavigationScreen = Depends(get_navigation_screen),
):
    apply_session(response, get_settings(), context)
    return await screen.load(context, path)


@router.get("/therapists", response_model=TherapistListResponse)
async def list_therapists(
    context: SessionContext = Depends(get_session_context),
    screen: TherapistsScreen = Depends(get_therapists_screen),
):
    therapists = await screen.list_active(context.access_token)
    return TherapistListResponse(therapists=therapists)


@router.post("/signup/validate", response_model=SignupValidationResponse)
def validate_signup_form(payload: SignupValidationRequest):
    if payload.field is None:
        return SignupValidationResponse(errors=validate_signup(payload))
    error = validate_signup_field(payload, payload.field)
    return SignupValidationResponse(errors={payload.field: error} if error else {})
