"""
Backend-as-a-service abstraction for Supabase and an in-memory test implementation.

The application treats the backend as an opaque collaborator: it sends
structured requests (table, filters, payload) and gets back rows or a
BackendError carrying a human-readable message.
"""

from __future__ import annotations

import asyncio
import contextlib
import hashlib
import logging
import secrets
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Protocol

import httpx
from postgrest import AsyncPostgrestClient
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import AsyncClient, AsyncClientOptions, acreate_client
from supabase_auth import AsyncGoTrueClient
from supabase_auth.errors import AuthError

from psicocompany.exceptions import BackendError

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    id: str
    email: Optional[str]
    metadata: dict = field(default_factory=dict)


@dataclass
class AuthSession:
    access_token: str
    refresh_token: Optional[str]
    expires_in: Optional[int]
    user: AuthUser


@dataclass
class AuthResult:
    user: Optional[AuthUser]
    session: Optional[AuthSession] = None


class BackendClient(Protocol):
    """Interface for authentication and table access."""

    async def sign_up(
        self, email: str, password: str, metadata: Optional[dict] = None
    ) -> AuthResult:
        ...

    async def sign_in(self, email: str, password: str) -> AuthResult:
        ...

    async def sign_out(self, access_token: str) -> None:
        ...

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        ...

    async def refresh_session(self, refresh_token: str) -> Optional[AuthSession]:
        ...

    async def select_one(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict] = None,
        access_token: Optional[str] = None,
    ) -> Optional[dict]:
        ...

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict] = None,
        access_token: Optional[str] = None,
    ) -> list[dict]:
        ...

    async def insert(
        self, table: str, payload: dict, access_token: Optional[str] = None
    ) -> list[dict]:
        ...

    async def update(
        self,
        table: str,
        payload: dict,
        filters: dict,
        access_token: Optional[str] = None,
    ) -> list[dict]:
        ...


def _parse_columns(columns: str) -> Optional[list[str]]:
    names = [c.strip() for c in (columns or "*").split(",") if c.strip()]
    if not names or "*" in names:
        return None
    return names


def _project(row: dict, columns: Optional[list[str]]) -> dict:
    if columns is None:
        return dict(row)
    return {name: row.get(name) for name in columns}


def _matches(row: dict, filters: Optional[dict]) -> bool:
    return all(row.get(key) == value for key, value in (filters or {}).items())


@dataclass
class _StoredUser:
    user: AuthUser
    password_hash: str


class InMemoryBackendClient:
    """Simple in-memory backend for development and tests."""

    def __init__(self):
        self.users: dict[str, _StoredUser] = {}
        self.access_tokens: dict[str, str] = {}
        self.refresh_tokens: dict[str, str] = {}
        self.tables: dict[str, list[dict]] = defaultdict(list)

    @staticmethod
    def _hash(password: str) -> str:
        return hashlib.sha256(password.encode("utf-8")).hexdigest()

    def _find_user(self, user_id: str) -> Optional[AuthUser]:
        for stored in self.users.values():
            if stored.user.id == user_id:
                return stored.user
        return None

    def _issue_session(self, user: AuthUser) -> AuthSession:
        access_token = secrets.token_urlsafe(24)
        refresh_token = secrets.token_urlsafe(24)
        self.access_tokens[access_token] = user.id
        self.refresh_tokens[refresh_token] = user.id
        return AuthSession(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=3600,
            user=user,
        )

    async def sign_up(
        self, email: str, password: str, metadata: Optional[dict] = None
    ) -> AuthResult:
        key = (email or "").strip().lower()
        if "@" not in key:
            raise BackendError(
                "Unable to validate email address: invalid format",
                code="validation_failed",
            )
        if key in self.users:
            raise BackendError("User already registered", code="user_already_exists")
        if len(password or "") < 6:
            raise BackendError(
                "Password should be at least 6 characters. (weak_password)",
                code="weak_password",
            )
        user = AuthUser(id=str(uuid.uuid4()), email=key, metadata=dict(metadata or {}))
        self.users[key] = _StoredUser(user=user, password_hash=self._hash(password))
        return AuthResult(user=user, session=self._issue_session(user))

    async def sign_in(self, email: str, password: str) -> AuthResult:
        stored = self.users.get((email or "").strip().lower())
        if stored is None or stored.password_hash != self._hash(password or ""):
            raise BackendError("Invalid login credentials", code="invalid_credentials")
        return AuthResult(user=stored.user, session=self._issue_session(stored.user))

    async def sign_out(self, access_token: str) -> None:
        user_id = self.access_tokens.pop(access_token, None)
        if user_id is None:
            return
        for token, owner in list(self.refresh_tokens.items()):
            if owner == user_id:
                del self.refresh_tokens[token]

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        user_id = self.access_tokens.get(access_token)
        if user_id is None:
            return None
        return self._find_user(user_id)

    async def refresh_session(self, refresh_token: str) -> Optional[AuthSession]:
        user_id = self.refresh_tokens.pop(refresh_token, None)
        user = self._find_user(user_id) if user_id else None
        if user is None:
            return None
        return self._issue_session(user)

    async def select_one(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict] = None,
        access_token: Optional[str] = None,
    ) -> Optional[dict]:
        rows = await self.select(table, columns, filters, access_token)
        if len(rows) > 1:
            raise BackendError(
                "JSON object requested, multiple (or no) rows returned",
                code="PGRST116",
            )
        return rows[0] if rows else None

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict] = None,
        access_token: Optional[str] = None,
    ) -> list[dict]:
        names = _parse_columns(columns)
        return [
            _project(row, names)
            for row in self.tables.get(table, [])
            if _matches(row, filters)
        ]

    async def insert(
        self, table: str, payload: dict, access_token: Optional[str] = None
    ) -> list[dict]:
        row = dict(payload)
        row.setdefault("id", str(uuid.uuid4()))
        self.tables[table].append(row)
        return [dict(row)]

    async def update(
        self,
        table: str,
        payload: dict,
        filters: dict,
        access_token: Optional[str] = None,
    ) -> list[dict]:
        updated = []
        for row in self.tables.get(table, []):
            if _matches(row, filters):
                row.update(payload)
                updated.append(dict(row))
        return updated

    def seed(self, table: str, rows: list[dict]) -> None:
        for row in rows:
            record = dict(row)
            record.setdefault("id", str(uuid.uuid4()))
            self.tables[table].append(record)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.access_tokens.clear()
        self.refresh_tokens.clear()
        self.tables.clear()


@contextlib.contextmanager
def _backend_errors() -> Iterator[None]:
    try:
        yield
    except AuthError as exc:
        raise BackendError(exc.message, code=getattr(exc, "code", None)) from exc
    except PostgrestAPIError as exc:
        raise BackendError(exc.message or str(exc), code=exc.code) from exc
    except httpx.HTTPError as exc:
        logger.warning("Backend request failed: %s", exc)
        raise BackendError(str(exc) or "Network error", code="network_error") from exc


def _filter_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def _to_auth_user(user: Any) -> Optional[AuthUser]:
    if user is None:
        return None
    return AuthUser(
        id=user.id, email=user.email, metadata=dict(user.user_metadata or {})
    )


def _to_auth_session(session: Any) -> Optional[AuthSession]:
    if session is None:
        return None
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        user=_to_auth_user(session.user),
    )


class SupabaseBackendClient:
    """
    Supabase-backed implementation using the async client.

    Auth calls share one anon client; every call passes its token explicitly.
    Table calls open a PostgREST client scoped to the caller's access token
    and close it when the call returns, so one user's token never reaches
    another request.
    """

    def __init__(self, url: str, key: str):
        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required")
        self.url = url.rstrip("/")
        self.key = key
        self._client: Optional[AsyncClient] = None
        self._client_lock = asyncio.Lock()

    async def _auth(self) -> AsyncGoTrueClient:
        async with self._client_lock:
            if self._client is None:
                options = AsyncClientOptions(
                    auto_refresh_token=False, persist_session=False
                )
                self._client = await acreate_client(self.url, self.key, options=options)
        return self._client.auth

    def _rest(self, access_token: Optional[str] = None) -> AsyncPostgrestClient:
        return AsyncPostgrestClient(
            f"{self.url}/rest/v1",
            headers={
                "apikey": self.key,
                "Authorization": f"Bearer {access_token or self.key}",
            },
        )

    async def sign_up(
        self, email: str, password: str, metadata: Optional[dict] = None
    ) -> AuthResult:
        auth = await self._auth()
        with _backend_errors():
            response = await auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": metadata or {}},
                }
            )
        return AuthResult(
            user=_to_auth_user(response.user),
            session=_to_auth_session(response.session),
        )

    async def sign_in(self, email: str, password: str) -> AuthResult:
        auth = await self._auth()
        with _backend_errors():
            response = await auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        return AuthResult(
            user=_to_auth_user(response.user),
            session=_to_auth_session(response.session),
        )

    async def sign_out(self, access_token: str) -> None:
        auth = await self._auth()
        with _backend_errors():
            await auth.admin.sign_out(access_token)

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        auth = await self._auth()
        try:
            with _backend_errors():
                response = await auth.get_user(access_token)
        except BackendError as exc:
            if exc.code == "network_error":
                raise
            # Expired or revoked tokens read as "no user".
            logger.info("Access token rejected: %s", exc.message)
            return None
        if response is None:
            return None
        return _to_auth_user(response.user)

    async def refresh_session(self, refresh_token: str) -> Optional[AuthSession]:
        auth = await self._auth()
        try:
            with _backend_errors():
                response = await auth.refresh_session(refresh_token)
        except BackendError as exc:
            if exc.code == "network_error":
                raise
            logger.info("Refresh token rejected: %s", exc.message)
            return None
        return _to_auth_session(response.session)

    async def select_one(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict] = None,
        access_token: Optional[str] = None,
    ) -> Optional[dict]:
        async with self._rest(access_token) as rest:
            query = rest.from_(table).select(columns)
            for key, value in (filters or {}).items():
                query = query.eq(key, _filter_value(value))
            with _backend_errors():
                response = await query.maybe_single().execute()
        if response is None:
            return None
        return response.data

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict] = None,
        access_token: Optional[str] = None,
    ) -> list[dict]:
        async with self._rest(access_token) as rest:
            query = rest.from_(table).select(columns)
            for key, value in (filters or {}).items():
                query = query.eq(key, _filter_value(value))
            with _backend_errors():
                response = await query.execute()
        return response.data or []

    async def insert(
        self, table: str, payload: dict, access_token: Optional[str] = None
    ) -> list[dict]:
        async with self._rest(access_token) as rest:
            with _backend_errors():
                response = await rest.from_(table).insert(payload).execute()
        return response.data or []

    async def update(
        self,
        table: str,
        payload: dict,
        filters: dict,
        access_token: Optional[str] = None,
    ) -> list[dict]:
        async with self._rest(access_token) as rest:
            query = rest.from_(table).update(payload)
            for key, value in filters.items():
                query = query.eq(key, _filter_value(value))
            with _backend_errors():
                response = await query.execute()
        return response.data or []
