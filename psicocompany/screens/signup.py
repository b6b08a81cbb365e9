"""
Signup screen: form validation, account creation and the initial rows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from psicocompany import messages
from psicocompany.backend_client import AuthSession, BackendClient
from psicocompany.exceptions import BackendError
from psicocompany.notifications import NotificationQueue, Severity
from psicocompany.schemas import SignupField, SignupForm
from psicocompany.validators import (
    validate_email,
    validate_full_name,
    validate_password,
)

logger = logging.getLogger(__name__)

PASSWORD_MISMATCH = "As senhas não coincidem"
TERMS_REQUIRED = "Você deve aceitar os termos de uso"
PATIENT_ROLE = "patient"


def validate_signup(form: SignupForm) -> dict[str, str]:
    """Validate the whole form, returning every field error at once."""
    errors: dict[str, str] = {}

    name_error = validate_full_name(form.full_name)
    if name_error:
        errors["full_name"] = name_error

    if not form.email:
        errors["email"] = "E-mail é obrigatório"
    elif not validate_email(form.email):
        errors["email"] = "E-mail inválido"

    if not form.password:
        errors["password"] = "Senha é obrigatória"
    else:
        password_error = validate_password(form.password)
        if password_error:
            errors["password"] = password_error

    if not form.confirm_password:
        errors["confirm_password"] = "Confirme sua senha"
    elif form.password != form.confirm_password:
        errors["confirm_password"] = PASSWORD_MISMATCH

    if not form.accept_terms:
        errors["terms"] = TERMS_REQUIRED

    return errors


def validate_signup_field(form: SignupForm, name: SignupField) -> Optional[str]:
    """
    Validate a single field as the user leaves it.

    Empty fields are not flagged here; whole-form validation on submit
    reports missing values.
    """
    if name == "full_name":
        if form.full_name and len(form.full_name.strip()) < 3:
            return validate_full_name(form.full_name)
        return None
    if name == "email":
        if form.email and not validate_email(form.email):
            return "E-mail inválido"
        return None
    if name == "password":
        return validate_password(form.password) if form.password else None
    if name == "confirm_password":
        if form.confirm_password and form.password != form.confirm_password:
            return PASSWORD_MISMATCH
        return None
    if name == "terms":
        return None if form.accept_terms else TERMS_REQUIRED
    raise ValueError(f"unknown signup field: {name}")


@dataclass
class SignupOutcome:
    success: bool
    errors: dict[str, str] = field(default_factory=dict)
    session: Optional[AuthSession] = None
    redirect_to: Optional[str] = None


class SignupScreen:
    def __init__(self, backend: BackendClient, notifications: NotificationQueue):
        self.backend = backend
        self.notifications = notifications

    async def submit(self, form: SignupForm) -> SignupOutcome:
        errors = validate_signup(form)
        if errors:
            self.notifications.enqueue(messages.FORM_HAS_ERRORS, Severity.ERROR)
            return SignupOutcome(success=False, errors=errors)

        try:
            result = await self.backend.sign_up(
                form.email,
                form.password,
                metadata={"full_name": form.full_name},
            )
        except BackendError as exc:
            logger.warning("Signup rejected for %s: %s", form.email, exc.message)
            self.notifications.enqueue(
                messages.signup_error_message(exc), Severity.ERROR
            )
            return SignupOutcome(success=False)
        except Exception:
            logger.exception("Unexpected error during signup")
            self.notifications.enqueue(messages.UNEXPECTED_ERROR, Severity.ERROR)
            return SignupOutcome(success=False)

        access_token = result.session.access_token if result.session else None
        if result.user is not None:
            await self._create_records(result.user.id, form.full_name, access_token)

        self.notifications.enqueue(messages.SIGNUP_SUCCESS, Severity.SUCCESS)
        return SignupOutcome(success=True, session=result.session, redirect_to="/")

    async def _create_records(
        self, user_id: str, full_name: str, access_token: Optional[str]
    ) -> None:
        # The account exists at this point; missing rows are logged only.
        try:
            await self.backend.insert(
                "profiles",
                {"user_id": user_id, "full_name": full_name, "role": PATIENT_ROLE},
                access_token=access_token,
            )
        except BackendError as exc:
            logger.error("Failed to create profile for %s: %s", user_id, exc.message)

        try:
            await self.backend.insert(
                "patients", {"user_id": user_id}, access_token=access_token
            )
        except BackendError as exc:
            logger.error(
                "Failed to create patient record for %s: %s", user_id, exc.message
            )
