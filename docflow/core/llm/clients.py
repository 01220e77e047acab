"""Completion backends, keyed by service id.

Semantic skills never talk to an SDK directly: they ask ``CompletionServices``
for a backend (the configured default, or one named in their template) and
call ``complete``. SDK errors are wrapped in ``CompletionFailed``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from anthropic import AsyncAnthropic
from openai import AsyncAzureOpenAI, AsyncOpenAI

from docflow.core.exceptions import CompletionFailed, ConfigurationError
from docflow.core.llm.prompts import PromptAdapter

if TYPE_CHECKING:
    from docflow.core.config import Settings

logger = logging.getLogger(__name__)


class CompletionService(Protocol):
    service_id: str

    async def complete(
        self,
        prompt: str,
        *,
        system: str = "",
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> str: ...


class OpenAIChatCompletion:
    """Chat completions over OpenAI or Azure OpenAI (same SDK surface)."""

    def __init__(self, service_id: str, client: AsyncOpenAI, model: str):
        self.service_id = service_id
        self._client = client
        self._model = model

    async def complete(
        self,
        prompt: str,
        *,
        system: str = "",
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> str:
        extra = {"temperature": temperature} if temperature is not None else {}
        try:
            resp = await self._client.chat.completions.create(
                model=self._model,
                max_tokens=max_tokens,
                **extra,
                **PromptAdapter.for_openai(system, [{"role": "user", "content": prompt}]),
            )
        except Exception as e:
            logger.error("Completion via %s failed: %s", self.service_id, e)
            raise CompletionFailed(e) from e
        return resp.choices[0].message.content or ""


class AnthropicCompletion:
    def __init__(self, service_id: str, client: AsyncAnthropic, model: str):
        self.service_id = service_id
        self._client = client
        self._model = model

    async def complete(
        self,
        prompt: str,
        *,
        system: str = "",
        max_tokens: int = 1024,
        temperature: float | None = None,
    ) -> str:
        extra = {"temperature": temperature} if temperature is not None else {}
        try:
            resp = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                **extra,
                **PromptAdapter.for_claude(system, [{"role": "user", "content": prompt}]),
            )
        except Exception as e:
            logger.error("Completion via %s failed: %s", self.service_id, e)
            raise CompletionFailed(e) from e
        return "".join(block.text for block in resp.content if getattr(block, "type", "") == "text")


class CompletionServices:
    """Completion backends by service id, one of them the default."""

    def __init__(self) -> None:
        self._services: dict[str, CompletionService] = {}
        self._default_id: str | None = None

    def add(self, service: CompletionService, set_as_default: bool = False) -> None:
        self._services[service.service_id] = service
        if set_as_default or self._default_id is None:
            self._default_id = service.service_id

    def get(self, service_id: str | None = None) -> CompletionService:
        """Return *service_id*'s backend, or the default one."""
        key = service_id or self._default_id
        if key is None or key not in self._services:
            raise ConfigurationError(f"No completion service registered as {key!r}")
        return self._services[key]

    @property
    def default_id(self) -> str | None:
        return self._default_id

    def __len__(self) -> int:
        return len(self._services)


def create_completion_services(settings: Settings) -> CompletionServices:
    """Register every backend that has credentials configured."""
    services = CompletionServices()
    default_id = settings.default_completion_service_id

    if settings.azure_openai_api_key and settings.azure_openai_endpoint:
        azure = AsyncAzureOpenAI(
            api_key=settings.azure_openai_api_key,
            azure_endpoint=settings.azure_openai_endpoint,
            api_version=settings.azure_openai_api_version,
        )
        services.add(
            OpenAIChatCompletion(
                settings.azure_openai_service_id, azure, settings.azure_openai_deployment_name
            ),
            set_as_default=settings.azure_openai_service_id == default_id,
        )
    if settings.openai_api_key:
        services.add(
            OpenAIChatCompletion(
                settings.openai_service_id,
                AsyncOpenAI(api_key=settings.openai_api_key),
                settings.openai_model,
            ),
            set_as_default=settings.openai_service_id == default_id,
        )
    if settings.anthropic_api_key:
        services.add(
            AnthropicCompletion(
                settings.anthropic_service_id,
                AsyncAnthropic(api_key=settings.anthropic_api_key),
                settings.anthropic_model,
            ),
            set_as_default=settings.anthropic_service_id == default_id,
        )

    if not len(services):
        raise ConfigurationError("No completion backend configured")
    if services.default_id != default_id:
        logger.warning(
            "Default completion service %r not configured, using %r",
            default_id,
            services.default_id,
        )
    return services
