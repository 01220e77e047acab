"""Delegated credential broker: acquires and caches Microsoft Graph tokens.

Native skills ask the broker for a bearer token right before each call and
never hold on to it. The broker keeps one token per request key and only
hands it out while it is unexpired and covers the requested scopes;
otherwise it goes back to the acquirer, silently first (MSAL token cache on
disk), then interactively (browser sign-in).
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import urlparse

import msal

from docflow.core.exceptions import AuthenticationFailed

if TYPE_CHECKING:
    from docflow.core.config import Settings

logger = logging.getLogger(__name__)

GRAPH_RESOURCE_PREFIX = "https://graph.microsoft.com/"
RESERVED_SCOPES = frozenset({"openid", "profile", "offline_access"})
AUTHORITY_URL = "https://login.microsoftonline.com/{tenant_id}"

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(UTC)


def normalize_scopes(scopes: Iterable[str]) -> frozenset[str]:
    """Canonical scope set: lower-case, Graph prefix stripped, OIDC scopes dropped."""
    normalized = set()
    for scope in scopes:
        s = scope.strip().lower()
        if s.startswith(GRAPH_RESOURCE_PREFIX):
            s = s[len(GRAPH_RESOURCE_PREFIX):]
        if s and s not in RESERVED_SCOPES:
            normalized.add(s)
    return frozenset(normalized)


@dataclass(frozen=True)
class TokenRequest:
    """Cache key for the broker."""

    client_id: str
    tenant_id: str
    scopes: frozenset[str]
    redirect_uri: str

    @classmethod
    def create(
        cls, client_id: str, tenant_id: str, scopes: Iterable[str], redirect_uri: str
    ) -> TokenRequest:
        return cls(client_id, tenant_id, frozenset(s.strip() for s in scopes if s.strip()), redirect_uri)

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenRequest:
        return cls.create(
            settings.msgraph_client_id,
            settings.msgraph_tenant_id,
            settings.scopes,
            settings.msgraph_redirect_uri,
        )


@dataclass(frozen=True)
class AccessToken:
    value: str
    scopes: frozenset[str]
    client_id: str
    tenant_id: str
    expires_at: datetime

    def covers(self, requested: Iterable[str]) -> bool:
        return normalize_scopes(requested) <= normalize_scopes(self.scopes)


class TokenAcquirer(Protocol):
    """Source of fresh tokens for the broker."""

    async def acquire_silent(self, request: TokenRequest) -> AccessToken | None:
        """Return a token from the local identity cache, or ``None``."""
        ...

    async def acquire_interactive(self, request: TokenRequest) -> AccessToken:
        """Sign the user in; raise ``AuthenticationFailed`` on failure."""
        ...


class CredentialBroker:
    """Owns the token cache; one instance per process, shared by native skills."""

    def __init__(
        self,
        acquirer: TokenAcquirer,
        clock: Clock = utcnow,
        expiry_skew: timedelta = timedelta(minutes=5),
    ):
        self._acquirer = acquirer
        self._clock = clock
        self._expiry_skew = expiry_skew
        self._tokens: dict[TokenRequest, AccessToken] = {}

    def _is_valid(self, token: AccessToken, request: TokenRequest) -> bool:
        return self._clock() + self._expiry_skew < token.expires_at and token.covers(request.scopes)

    def cached(self, request: TokenRequest) -> AccessToken | None:
        """Currently cached token for *request*, valid or not."""
        return self._tokens.get(request)

    def invalidate(self, request: TokenRequest) -> None:
        self._tokens.pop(request, None)

    async def acquire(self, request: TokenRequest) -> AccessToken:
        cached = self._tokens.get(request)
        if cached is not None and self._is_valid(cached, request):
            return cached
        if cached is not None:
            logger.debug("Cached token for %s expired or under-scoped", request.client_id)
            self.invalidate(request)

        token = await self._acquire_silent(request)
        if token is None:
            logger.info("Silent token acquisition failed, starting interactive sign-in")
            token = await self._acquirer.acquire_interactive(request)
            if not token.covers(request.scopes):
                missing = normalize_scopes(request.scopes) - normalize_scopes(token.scopes)
                raise AuthenticationFailed(
                    f"Granted token is missing scopes: {', '.join(sorted(missing))}"
                )
            if not self._is_valid(token, request):
                raise AuthenticationFailed("Interactive sign-in returned an expired token")

        self._tokens[request] = token
        return token

    async def _acquire_silent(self, request: TokenRequest) -> AccessToken | None:
        try:
            token = await self._acquirer.acquire_silent(request)
        except AuthenticationFailed as e:
            logger.warning("Silent token acquisition error: %s", e)
            return None
        if token is None or not self._is_valid(token, request):
            return None
        return token

    async def get_token(self, request: TokenRequest) -> str:
        """Bearer token value for *request*."""
        token = await self.acquire(request)
        return token.value

    def token_provider(self, request: TokenRequest) -> Callable[[], Awaitable[str]]:
        """Zero-argument coroutine factory bound to *request*."""
        return partial(self.get_token, request)


class MsalTokenAcquirer:
    """``TokenAcquirer`` backed by MSAL public client apps.

    The MSAL token cache is persisted to *cache_path* so the user signs in
    interactively only when no cached account can serve the request.
    """

    def __init__(self, cache_path: Path, clock: Clock = utcnow):
        self._cache_path = cache_path
        self._clock = clock
        self._cache = msal.SerializableTokenCache()
        if cache_path.exists():
            self._cache.deserialize(cache_path.read_text())
        self._apps: dict[tuple[str, str], msal.PublicClientApplication] = {}

    def _app(self, request: TokenRequest) -> msal.PublicClientApplication:
        key = (request.client_id, request.tenant_id)
        if key not in self._apps:
            self._apps[key] = msal.PublicClientApplication(
                request.client_id,
                authority=AUTHORITY_URL.format(tenant_id=request.tenant_id),
                token_cache=self._cache,
            )
        return self._apps[key]

    def _persist(self) -> None:
        if self._cache.has_state_changed:
            self._cache_path.parent.mkdir(parents=True, exist_ok=True)
            # Holds refresh tokens: owner read/write only.
            fd = os.open(self._cache_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            os.fchmod(fd, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(self._cache.serialize())

    def _to_token(self, request: TokenRequest, result: dict[str, Any]) -> AccessToken:
        granted = result.get("scope")
        scopes = frozenset(granted.split()) if granted else request.scopes
        return AccessToken(
            value=result["access_token"],
            scopes=scopes,
            client_id=request.client_id,
            tenant_id=request.tenant_id,
            expires_at=self._clock() + timedelta(seconds=int(result.get("expires_in", 3600))),
        )

    def _silent(self, request: TokenRequest) -> AccessToken | None:
        app = self._app(request)
        accounts = app.get_accounts()
        if not accounts:
            return None
        result = app.acquire_token_silent(sorted(request.scopes), account=accounts[0])
        self._persist()
        if not result or "access_token" not in result:
            return None
        return self._to_token(request, result)

    def _interactive(self, request: TokenRequest) -> AccessToken:
        port = urlparse(request.redirect_uri).port
        try:
            result = self._app(request).acquire_token_interactive(
                sorted(request.scopes), prompt="select_account", port=port
            )
        except Exception as e:
            raise AuthenticationFailed(f"Interactive sign-in failed: {e}") from e
        self._persist()
        if "access_token" not in result:
            raise AuthenticationFailed(
                result.get("error_description") or result.get("error") or "no access token returned"
            )
        return self._to_token(request, result)

    async def acquire_silent(self, request: TokenRequest) -> AccessToken | None:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._silent, request)
        except Exception as e:
            raise AuthenticationFailed(f"Silent acquisition failed: {e}") from e

    async def acquire_interactive(self, request: TokenRequest) -> AccessToken:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._interactive, request)
