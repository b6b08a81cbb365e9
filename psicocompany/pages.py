"""
Server-rendered HTML pages.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from psicocompany.config import get_settings
from psicocompany.dependencies import (
    get_login_screen,
    get_navigation_screen,
    get_notifications,
    get_profile_screen,
    get_session_context,
    get_signup_screen,
    get_therapists_screen,
)
from psicocompany.notifications import NotificationQueue
from psicocompany.rendering import render_template
from psicocompany.schemas import LoginForm, NotificationOut, ProfileForm, SignupForm
from psicocompany.screens import (
    LoginScreen,
    NavigationScreen,
    ProfileScreen,
    SignupScreen,
    TherapistsScreen,
)
from psicocompany.session import (
    SessionContext,
    apply_session,
    clear_session_cookies,
    set_session_cookies,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def toast_views(notifications: NotificationQueue) -> list[NotificationOut]:
    return [
        NotificationOut(**n.as_dict(), remaining=notifications.remaining(n))
        for n in notifications.active()
    ]


async def _render(
    request: Request,
    template_name: str,
    *,
    context: SessionContext,
    navigation: NavigationScreen,
    notifications: NotificationQueue,
    status_code: int = 200,
    **values,
) -> HTMLResponse:
    nav = await navigation.load(context, request.url.path)
    response = render_template(
        template_name,
        {
            "nav": nav,
            "toasts": toast_views(notifications),
            "current_path": request.url.path,
            **values,
        },
        request,
        status_code=status_code,
    )
    apply_session(response, get_settings(), context)
    return response


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def _safe_next(target: str | None) -> str:
    # Only same-site paths; "//host" would leave the site.
    if not target or not target.startswith("/") or target.startswith("//"):
        return "/"
    return target


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    context: SessionContext = Depends(get_session_context),
    navigation: NavigationScreen = Depends(get_navigation_screen),
    notifications: NotificationQueue = Depends(get_notifications),
):
    return await _render(
        request,
        "home.html",
        context=context,
        navigation=navigation,
        notifications=notifications,
        email=context.user.email if context.user else None,
    )


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(
    request: Request,
    context: SessionContext = Depends(get_session_context),
    navigation: NavigationScreen = Depends(get_navigation_screen),
    notifications: NotificationQueue = Depends(get_notifications),
):
    return await _render(
        request,
        "signup.html",
        context=context,
        navigation=navigation,
        notifications=notifications,
        form=SignupForm(),
        errors={},
    )


@router.post("/signup", response_class=HTMLResponse)
async def signup_submit(
    request: Request,
    full_name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    accept_terms: bool = Form(False),
    context: SessionContext = Depends(get_session_context),
    screen: SignupScreen = Depends(get_signup_screen),
    navigation: NavigationScreen = Depends(get_navigation_screen),
    notifications: NotificationQueue = Depends(get_notifications),
):
    form = SignupForm(
        full_name=full_name,
        email=email,
        password=password,
        confirm_password=confirm_password,
        accept_terms=accept_terms,
    )
    outcome = await screen.submit(form)
    if outcome.success:
        response = _redirect(outcome.redirect_to or "/")
        if outcome.session is not None:
            set_session_cookies(response, get_settings(), outcome.session)
        return response

    # Passwords are never echoed back into the page.
    form = form.model_copy(update={"password": "", "confirm_password": ""})
    return await _render(
        request,
        "signup.html",
        context=context,
        navigation=navigation,
        notifications=notifications,
        status_code=400,
        form=form,
        errors=outcome.errors,
    )


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    context: SessionContext = Depends(get_session_context),
    navigation: NavigationScreen = Depends(get_navigation_screen),
    notifications: NotificationQueue = Depends(get_notifications),
):
    return await _render(
        request,
        "login.html",
        context=context,
        navigation=navigation,
        notifications=notifications,
        form=LoginForm(),
        errors={},
    )


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    context: SessionContext = Depends(get_session_context),
    screen: LoginScreen = Depends(get_login_screen),
    navigation: NavigationScreen = Depends(get_navigation_screen),
    notifications: NotificationQueue = Depends(get_notifications),
):
    outcome = await screen.submit(LoginForm(email=email, password=password))
    if outcome.success:
        response = _redirect(outcome.redirect_to or "/")
        set_session_cookies(response, get_settings(), outcome.session)
        return response

    return await _render(
        request,
        "login.html",
        context=context,
        navigation=navigation,
        notifications=notifications,
        status_code=400,
        form=LoginForm(email=email),
        errors=outcome.errors,
    )


@router.post("/logout")
async def logout(
    context: SessionContext = Depends(get_session_context),
    screen: LoginScreen = Depends(get_login_screen),
):
    await screen.logout(context)
    response = _redirect("/")
    clear_session_cookies(response, get_settings())
    return response


@router.get("/perfil", response_class=HTMLResponse)
async def profile_page(
    request: Request,
    context: SessionContext = Depends(get_session_context),
    screen: ProfileScreen = Depends(get_profile_screen),
    navigation: NavigationScreen = Depends(get_navigation_screen),
    notifications: NotificationQueue = Depends(get_notifications),
):
    view = await screen.load(context)
    return await _render(
        request,
        "profile.html",
        context=context,
        navigation=navigation,
        notifications=notifications,
        view=view,
    )


@router.post("/perfil", response_class=HTMLResponse)
async def profile_submit(
    request: Request,
    full_name: str = Form(""),
    phone: str = Form(""),
    context: SessionContext = Depends(get_session_context),
    screen: ProfileScreen = Depends(get_profile_screen),
    navigation: NavigationScreen = Depends(get_navigation_screen),
    notifications: NotificationQueue = Depends(get_notifications),
):
    view = await screen.save(context, ProfileForm(full_name=full_name, phone=phone))
    return await _render(
        request,
        "profile.html",
        context=context,
        navigation=navigation,
        notifications=notifications,
        status_code=400 if view.errors else 200,
        view=view,
    )


@router.get("/psicologos", response_class=HTMLResponse)
async def therapists_page(
    request: Request,
    context: SessionContext = Depends(get_session_context),
    screen: TherapistsScreen = Depends(get_therapists_screen),
    navigation: NavigationScreen = Depends(get_navigation_screen),
    notifications: NotificationQueue = Depends(get_notifications),
):
    therapists = await screen.list_active(context.access_token)
    return await _render(
        request,
        "therapists.html",
        context=context,
        navigation=navigation,
        notifications=notifications,
        therapists=therapists,
    )


@router.post("/notifications/{notification_id}/dismiss")
async def dismiss_notification(
    notification_id: int,
    next: str = Form("/"),
    notifications: NotificationQueue = Depends(get_notifications),
):
    notifications.dismiss(notification_id)
    return _redirect(_safe_next(next))
