"""
Profile screen: load and save the user's name and phone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from psicocompany import messages
from psicocompany.backend_client import BackendClient
from psicocompany.exceptions import BackendError
from psicocompany.notifications import NotificationQueue, Severity
from psicocompany.schemas import ProfileForm
from psicocompany.session import SessionContext
from psicocompany.validators import format_phone, validate_phone

logger = logging.getLogger(__name__)


@dataclass
class ProfileView:
    logged_in: bool
    form: ProfileForm = field(default_factory=ProfileForm)
    errors: dict[str, str] = field(default_factory=dict)
    saved: bool = False


class ProfileScreen:
    def __init__(self, backend: BackendClient, notifications: NotificationQueue):
        self.backend = backend
        self.notifications = notifications

    async def load(self, context: SessionContext) -> ProfileView:
        if not context.logged_in:
            return ProfileView(logged_in=False)
        try:
            row = await self.backend.select_one(
                "profiles",
                "full_name, phone",
                {"user_id": context.user.id},
                access_token=context.access_token,
            )
        except BackendError as exc:
            logger.error("Failed to load profile %s: %s", context.user.id, exc.message)
            row = None
        row = row or {}
        return ProfileView(
            logged_in=True,
            form=ProfileForm(
                full_name=row.get("full_name") or "",
                phone=row.get("phone") or "",
            ),
        )

    async def save(self, context: SessionContext, form: ProfileForm) -> ProfileView:
        if not context.logged_in:
            self.notifications.enqueue(messages.LOGIN_REQUIRED, Severity.WARNING)
            return ProfileView(logged_in=False, form=form)

        phone_error = validate_phone(form.phone)
        if phone_error:
            self.notifications.enqueue(messages.FORM_HAS_ERRORS, Severity.ERROR)
            return ProfileView(logged_in=True, form=form, errors={"phone": phone_error})

        payload = ProfileForm(
            full_name=form.full_name.strip(),
            phone=format_phone(form.phone) if form.phone.strip() else "",
        )
        try:
            await self.backend.update(
                "profiles",
                payload.model_dump(),
                {"user_id": context.user.id},
                access_token=context.access_token,
            )
        except BackendError as exc:
            logger.warning("Profile update failed for %s: %s", context.user.id, exc.message)
            self.notifications.enqueue(exc.message, Severity.ERROR)
            return ProfileView(logged_in=True, form=form)

        self.notifications.enqueue(messages.PROFILE_SAVED, Severity.SUCCESS)
        return ProfileView(logged_in=True, form=payload, saved=True)
