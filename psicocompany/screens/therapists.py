"""
Therapist listing.
"""

from __future__ import annotations

import logging
from typing import Optional

from psicocompany import messages
from psicocompany.backend_client import BackendClient
from psicocompany.exceptions import BackendError
from psicocompany.notifications import NotificationQueue, Severity
from psicocompany.schemas import Therapist

logger = logging.getLogger(__name__)

THERAPIST_COLUMNS = "id, crp, bio, price_cents, session_duration_min, is_active"


class TherapistsScreen:
    def __init__(self, backend: BackendClient, notifications: NotificationQueue):
        self.backend = backend
        self.notifications = notifications

    async def list_active(self, access_token: Optional[str] = None) -> list[Therapist]:
        try:
            rows = await self.backend.select(
                "therapists",
                THERAPIST_COLUMNS,
                {"is_active": True},
                access_token=access_token,
            )
        except BackendError as exc:
            logger.error("Failed to list therapists: %s", exc.message)
            self.notifications.enqueue(messages.THERAPISTS_UNAVAILABLE, Severity.ERROR)
            return []
        return [Therapist.model_validate(row) for row in rows]
