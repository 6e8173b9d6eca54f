from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from pydantic import ValidationError

from moviedeck.errors import MoviedeckError
from moviedeck.models.tvdb import TvdbAuthData, TvdbResponse

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)
DEFAULT_SAFETY_MARGIN = timedelta(hours=1)


class AuthenticationError(MoviedeckError):
    """Raised when the catalog refuses to issue a bearer token."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class Credential:
    token: str
    expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        return now < self.expires_at


def _utcnow() -> datetime:
    return datetime.now(UTC)


class CatalogAuthManager:
    """Owns the bearer credential for one HTTP client.

    The first caller to find the credential missing or expired starts a login
    task; every other caller awaits that same task, so concurrent page requests
    produce a single ``POST /login``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        *,
        pin: str | None = None,
        token_lifetime: timedelta = DEFAULT_TOKEN_LIFETIME,
        safety_margin: timedelta = DEFAULT_SAFETY_MARGIN,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._pin = pin
        self._ttl = token_lifetime - safety_margin
        self._clock = clock
        self._credential: Credential | None = None
        self._inflight: asyncio.Task[Credential] | None = None

    @property
    def credential(self) -> Credential | None:
        return self._credential

    async def ensure_authenticated(self) -> Credential:
        credential = self._credential
        if credential is not None and credential.is_valid(self._clock()):
            return credential

        task = self._inflight
        if task is None:
            task = asyncio.get_running_loop().create_task(self._login())
            task.add_done_callback(self._clear_inflight)
            self._inflight = task
        # A cancelled waiter must not cancel the login other callers share
        return await asyncio.shield(task)

    def invalidate(self, rejected_token: str | None = None) -> None:
        """Forget the cached credential so the next request logs in again.

        With ``rejected_token`` the credential is only dropped when it is still the
        one that was rejected; a token refreshed in the meantime is kept.
        """
        credential = self._credential
        if rejected_token is not None and (credential is None or credential.token != rejected_token):
            return
        self._credential = None
        self._client.headers.pop("Authorization", None)

    def build_login_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"apikey": self._api_key}
        # The API treats an empty pin differently from a missing one
        if self._pin:
            payload["pin"] = self._pin
        return payload

    async def _login(self) -> Credential:
        try:
            response = await self._client.post("/login", json=self.build_login_payload())
        except httpx.HTTPError as exc:
            raise AuthenticationError(f"TVDB login request failed: {exc}") from exc

        if not response.is_success:
            raise AuthenticationError(
                f"TVDB authentication failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            envelope = TvdbResponse[TvdbAuthData].model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise AuthenticationError(
                f"TVDB login returned an unreadable payload: {exc}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        token = envelope.data.token if envelope.data else None
        if not token:
            raise AuthenticationError(
                "TVDB authentication failed: no token returned",
                status_code=response.status_code,
                body=response.text,
            )

        credential = Credential(token=token, expires_at=self._clock() + self._ttl)
        self._credential = credential
        self._client.headers["Authorization"] = f"Bearer {token}"
        logger.debug("Obtained TVDB token valid until %s", credential.expires_at.isoformat())
        return credential

    def _clear_inflight(self, task: asyncio.Task[Credential]) -> None:
        if self._inflight is task:
            self._inflight = None
        # Mark the failure as retrieved when every waiter was cancelled
        if not task.cancelled():
            task.exception()


__all__ = ["AuthenticationError", "CatalogAuthManager", "Credential"]
