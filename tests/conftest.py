"""Test fixtures for docflow."""

import os
from datetime import UTC, datetime, timedelta

import pytest

# Set test environment before importing app modules
os.environ.setdefault("MSGRAPH_CLIENT_ID", "test-client")
os.environ.setdefault("MSGRAPH_TENANT_ID", "test-tenant")
os.environ.setdefault("ONEDRIVE_PATH_TO_FILE", "/Reports/Q3.docx")
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ["LANGFUSE_PUBLIC_KEY"] = ""
os.environ.setdefault("APP_ENV", "testing")

from docflow.core.credentials import AccessToken, CredentialBroker, TokenRequest

NOW = datetime(2026, 10, 14, 15, 30, tzinfo=UTC)  # a Wednesday


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeAcquirer:
    """TokenAcquirer that records calls and mints predictable tokens."""

    def __init__(
        self,
        clock: FakeClock,
        silent: bool = True,
        lifetime: timedelta = timedelta(hours=1),
        granted_scopes: frozenset[str] | None = None,
        interactive_error: Exception | None = None,
    ):
        self.clock = clock
        self.silent = silent
        self.lifetime = lifetime
        self.granted_scopes = granted_scopes
        self.interactive_error = interactive_error
        self.silent_calls = 0
        self.interactive_calls = 0

    def _mint(self, request: TokenRequest, kind: str, n: int) -> AccessToken:
        return AccessToken(
            value=f"{kind}-token-{n}",
            scopes=self.granted_scopes if self.granted_scopes is not None else request.scopes,
            client_id=request.client_id,
            tenant_id=request.tenant_id,
            expires_at=self.clock() + self.lifetime,
        )

    async def acquire_silent(self, request: TokenRequest) -> AccessToken | None:
        self.silent_calls += 1
        if not self.silent:
            return None
        return self._mint(request, "silent", self.silent_calls)

    async def acquire_interactive(self, request: TokenRequest) -> AccessToken:
        self.interactive_calls += 1
        if self.interactive_error is not None:
            raise self.interactive_error
        return self._mint(request, "interactive", self.interactive_calls)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_request():
    return TokenRequest.create(
        "test-client", "test-tenant", ["Files.ReadWrite", "Mail.Send"], "http://localhost:8400"
    )


@pytest.fixture
def make_acquirer(clock):
    """Factory for FakeAcquirer variants sharing the test clock."""

    def _make(**kwargs) -> FakeAcquirer:
        return FakeAcquirer(clock, **kwargs)

    return _make


@pytest.fixture
def acquirer(make_acquirer):
    return make_acquirer()


@pytest.fixture
def broker(acquirer, clock):
    return CredentialBroker(acquirer, clock=clock)


class FakeCompletion:
    """CompletionService that returns canned text and records prompts."""

    def __init__(self, reply: str = "A summary.", service_id: str = "fake", error: Exception | None = None):
        self.service_id = service_id
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def complete(self, prompt, *, system="", max_tokens=1024, temperature=None):
        self.calls.append(
            {"prompt": prompt, "system": system, "max_tokens": max_tokens, "temperature": temperature}
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def completion():
    return FakeCompletion()


@pytest.fixture
def completions(completion):
    from docflow.core.llm.clients import CompletionServices

    services = CompletionServices()
    services.add(completion, set_as_default=True)
    return services
