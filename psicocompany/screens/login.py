"""
Login and logout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from psicocompany import messages
from psicocompany.backend_client import AuthSession, BackendClient
from psicocompany.exceptions import BackendError
from psicocompany.notifications import NotificationQueue, Severity
from psicocompany.schemas import LoginForm
from psicocompany.session import SessionContext
from psicocompany.validators import validate_email

logger = logging.getLogger(__name__)


@dataclass
class LoginOutcome:
    success: bool
    errors: dict[str, str] = field(default_factory=dict)
    session: Optional[AuthSession] = None
    redirect_to: Optional[str] = None


def validate_login(form: LoginForm) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not form.email:
        errors["email"] = "E-mail é obrigatório"
    elif not validate_email(form.email):
        errors["email"] = "E-mail inválido"
    if not form.password:
        errors["password"] = "Senha é obrigatória"
    return errors


class LoginScreen:
    def __init__(self, backend: BackendClient, notifications: NotificationQueue):
        self.backend = backend
        self.notifications = notifications

    async def submit(self, form: LoginForm) -> LoginOutcome:
        errors = validate_login(form)
        if errors:
            self.notifications.enqueue(messages.FORM_HAS_ERRORS, Severity.ERROR)
            return LoginOutcome(success=False, errors=errors)

        try:
            result = await self.backend.sign_in(form.email, form.password)
        except BackendError as exc:
            logger.info("Login rejected for %s: %s", form.email, exc.message)
            self.notifications.enqueue(messages.login_error_message(exc), Severity.ERROR)
            return LoginOutcome(success=False)

        if result.session is None:
            self.notifications.enqueue(messages.UNEXPECTED_ERROR, Severity.ERROR)
            return LoginOutcome(success=False)

        self.notifications.enqueue(messages.LOGIN_SUCCESS, Severity.SUCCESS)
        return LoginOutcome(success=True, session=result.session, redirect_to="/")

    async def logout(self, context: SessionContext) -> None:
        if context.access_token:
            try:
                await self.backend.sign_out(context.access_token)
            except BackendError as exc:
                logger.warning("Backend sign-out failed: %s", exc.message)
        self.notifications.enqueue(messages.LOGOUT_SUCCESS, Severity.INFO)
