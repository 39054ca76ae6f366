"""Identity directory client: the external system of record for accounts, credentials and sessions.

``SupabaseDirectory`` talks to the Supabase Auth (GoTrue) REST API with the service
role key. Every call has a bounded timeout; timeouts and connection failures surface
as ``ServiceUnavailableError``. Only idempotent reads are retried.
"""

from __future__ import annotations

import abc
import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from app.core.errors import ServiceUnavailableError, UpstreamError
from app.schemas.identity import DirectorySession, Identity

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class DirectoryError(UpstreamError):
    """Raised when the identity directory returns an error response."""

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message)


class DirectoryUnavailableError(ServiceUnavailableError):
    """Raised when the identity directory times out or cannot be reached."""


class DirectoryNotConfiguredError(Exception):
    """Raised when the supabase backend is selected but required settings are missing."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class IdentityDirectory(abc.ABC):
    """Async interface every directory backend implements."""

    name = "directory"

    @abc.abstractmethod
    async def list_all(self) -> list[Identity]:
        """Return every identity in the directory."""

    @abc.abstractmethod
    async def get_by_id(self, identity_id: str) -> Identity | None:
        """Return the identity, or None when it does not exist."""

    @abc.abstractmethod
    async def create_with_credential(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> Identity:
        """Create a confirmed identity with a password credential and metadata."""

    @abc.abstractmethod
    async def verify_credential(self, email: str, password: str) -> DirectorySession | None:
        """Check email + password; return a new session, or None when rejected."""

    @abc.abstractmethod
    async def resolve_session(self, access_token: str) -> Identity | None:
        """Return the identity a session token belongs to, or None when invalid/expired."""

    @abc.abstractmethod
    async def update_metadata(self, identity_id: str, patch: dict[str, Any]) -> Identity:
        """Shallow-merge ``patch`` into the identity's metadata (last write wins)."""

    @abc.abstractmethod
    async def update_password(self, identity_id: str, password: str) -> Identity:
        """Replace the identity's password credential."""

    @abc.abstractmethod
    async def revoke_session(self, access_token: str) -> None:
        """Invalidate a session token."""

    async def aclose(self) -> None:
        """Release transport resources."""


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except (json.JSONDecodeError, ValueError):
        return resp.text[:300] if resp.text else "Unknown error"
    if isinstance(body, dict):
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value[:300]
    return json.dumps(body)[:300]


class SupabaseDirectory(IdentityDirectory):
    """Supabase Auth admin + session API over httpx."""

    name = "supabase"

    def __init__(
        self,
        base_url: str,
        service_key: str,
        timeout: float = 5.0,
        read_retries: int = 1,
        page_size: int = 200,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._auth_url = f"{base_url.rstrip('/')}/auth/v1"
        self._service_key = service_key
        self._read_retries = read_retries
        self._page_size = page_size
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    def _headers(self, bearer: str | None = None) -> dict[str, str]:
        return {
            "apikey": self._service_key,
            "Authorization": f"Bearer {bearer or self._service_key}",
            "Accept": "application/json",
        }

    async def _send(
        self,
        method: str,
        path: str,
        *,
        bearer: str | None = None,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        retries: int = 0,
    ) -> httpx.Response:
        """Send one request; retry transport failures up to ``retries`` times."""
        url = f"{self._auth_url}{path}"
        attempt = 0
        while True:
            try:
                return await self._client.request(
                    method,
                    url,
                    headers=self._headers(bearer),
                    params=params,
                    json=json_body,
                )
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt < retries:
                    attempt += 1
                    logger.warning(
                        "Directory request failed; retrying",
                        extra={"method": method, "path": path, "attempt": attempt},
                    )
                    continue
                logger.error(
                    "Directory unreachable",
                    extra={"method": method, "path": path, "error": type(e).__name__},
                )
                raise DirectoryUnavailableError(
                    "Identity directory is unavailable. Try again later."
                ) from e
            except httpx.HTTPError as e:
                logger.error(
                    "Directory request failed",
                    extra={"method": method, "path": path, "error": type(e).__name__},
                )
                raise DirectoryError("Identity directory request failed.") from e

    @staticmethod
    def _raise_for_status(resp: httpx.Response, action: str) -> None:
        if resp.status_code >= 400:
            detail = _error_detail(resp)
            logger.error(
                "Directory returned an error",
                extra={"action": action, "status_code": resp.status_code, "detail": detail},
            )
            raise DirectoryError(
                f"Identity directory rejected {action} ({resp.status_code}).",
                upstream_status=resp.status_code,
            )

    async def list_all(self) -> list[Identity]:
        identities: list[Identity] = []
        page = 1
        while True:
            resp = await self._send(
                "GET",
                "/admin/users",
                params={"page": page, "per_page": self._page_size},
                retries=self._read_retries,
            )
            self._raise_for_status(resp, "list users")
            users = resp.json().get("users") or []
            identities.extend(Identity.model_validate(u) for u in users)
            if len(users) < self._page_size:
                return identities
            page += 1

    async def get_by_id(self, identity_id: str) -> Identity | None:
        resp = await self._send(
            "GET", f"/admin/users/{identity_id}", retries=self._read_retries
        )
        if resp.status_code == 404:
            return None
        # GoTrue answers 400/422 for ids that are not valid UUIDs
        if resp.status_code in (400, 422):
            return None
        self._raise_for_status(resp, "get user")
        return Identity.model_validate(resp.json())

    async def create_with_credential(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> Identity:
        resp = await self._send(
            "POST",
            "/admin/users",
            json_body={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": metadata,
            },
        )
        self._raise_for_status(resp, "create user")
        return Identity.model_validate(resp.json())

    async def verify_credential(self, email: str, password: str) -> DirectorySession | None:
        resp = await self._send(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json_body={"email": email, "password": password},
        )
        if resp.status_code in (400, 401):
            return None
        self._raise_for_status(resp, "password sign-in")
        body = resp.json()
        return DirectorySession(
            access_token=body["access_token"],
            token_type=body.get("token_type") or "bearer",
            expires_in=body.get("expires_in"),
            identity=Identity.model_validate(body["user"]),
        )

    async def resolve_session(self, access_token: str) -> Identity | None:
        resp = await self._send(
            "GET", "/user", bearer=access_token, retries=self._read_retries
        )
        if resp.status_code in (401, 403, 404):
            return None
        self._raise_for_status(resp, "session lookup")
        return Identity.model_validate(resp.json())

    async def update_metadata(self, identity_id: str, patch: dict[str, Any]) -> Identity:
        resp = await self._send(
            "PUT", f"/admin/users/{identity_id}", json_body={"user_metadata": patch}
        )
        self._raise_for_status(resp, "update user metadata")
        return Identity.model_validate(resp.json())

    async def update_password(self, identity_id: str, password: str) -> Identity:
        resp = await self._send(
            "PUT", f"/admin/users/{identity_id}", json_body={"password": password}
        )
        self._raise_for_status(resp, "update password")
        return Identity.model_validate(resp.json())

    async def revoke_session(self, access_token: str) -> None:
        resp = await self._send(
            "POST", "/logout", bearer=access_token, params={"scope": "local"}
        )
        # Already-expired sessions are treated as logged out
        if resp.status_code in (401, 403, 404):
            return
        self._raise_for_status(resp, "logout")

    async def aclose(self) -> None:
        await self._client.aclose()


def build_directory(settings: Settings) -> IdentityDirectory:
    """Create the directory backend selected by DIRECTORY_BACKEND."""
    if settings.DIRECTORY_BACKEND == "memory":
        from app.services.memory_directory import InMemoryDirectory

        return InMemoryDirectory(bcrypt_rounds=settings.BCRYPT_ROUNDS)

    if not settings.SUPABASE_URL:
        raise DirectoryNotConfiguredError("SUPABASE_URL is not set.")
    if settings.SUPABASE_SERVICE_KEY is None or not settings.SUPABASE_SERVICE_KEY.get_secret_value().strip():
        raise DirectoryNotConfiguredError("SUPABASE_SERVICE_KEY is not set.")
    return SupabaseDirectory(
        base_url=settings.SUPABASE_URL,
        service_key=settings.SUPABASE_SERVICE_KEY.get_secret_value(),
        timeout=settings.DIRECTORY_REQUEST_TIMEOUT_SEC,
        read_retries=settings.DIRECTORY_READ_RETRIES,
        page_size=settings.DIRECTORY_PAGE_SIZE,
    )
