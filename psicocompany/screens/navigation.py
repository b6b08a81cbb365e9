"""
Authentication-aware navigation bar state.
"""

from __future__ import annotations

import logging
from typing import Optional

from psicocompany.backend_client import BackendClient
from psicocompany.exceptions import BackendError
from psicocompany.schemas import NavigationLink, NavigationState
from psicocompany.session import SessionContext

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Usuário"


def get_initials(name: Optional[str], email: Optional[str]) -> str:
    if name:
        letters = "".join(part[0] for part in name.split() if part)
        if letters:
            return letters.upper()[:2]
    if email:
        return email[0].upper()
    return "U"


class NavigationScreen:
    def __init__(self, backend: BackendClient):
        self.backend = backend

    async def load(self, context: SessionContext, path: str = "/") -> NavigationState:
        if not context.logged_in:
            return NavigationState(
                logged_in=False,
                links=[
                    NavigationLink(label="Entrar", href="/login", active=path == "/login"),
                    NavigationLink(
                        label="Começar agora", href="/signup", active=path == "/signup"
                    ),
                ],
            )

        user = context.user
        profile = await self._load_profile(user.id, context.access_token)
        full_name = profile.get("full_name") or None
        return NavigationState(
            logged_in=True,
            email=user.email,
            display_name=full_name or DEFAULT_DISPLAY_NAME,
            initials=get_initials(full_name, user.email),
            avatar_url=profile.get("avatar_url") or None,
            links=[
                NavigationLink(
                    label="Psicólogos", href="/psicologos", active=path == "/psicologos"
                ),
            ],
            menu=[
                NavigationLink(
                    label="Meu Perfil", href="/perfil", icon="👤", active=path == "/perfil"
                ),
                NavigationLink(
                    label="Configurações",
                    href="/configuracoes",
                    icon="⚙️",
                    active=path == "/configuracoes",
                ),
                NavigationLink(label="Sair", href="/logout", icon="🚪"),
            ],
        )

    async def _load_profile(self, user_id: str, access_token: Optional[str]) -> dict:
        try:
            profile = await self.backend.select_one(
                "profiles",
                "full_name, avatar_url",
                {"user_id": user_id},
                access_token=access_token,
            )
        except BackendError as exc:
            logger.error("Failed to load profile for navigation: %s", exc.message)
            return {}
        return profile or {}
