"""Semantic skills: prompt templates rendered from context and sent to an LLM."""

from __future__ import annotations

import logging
from string import Formatter
from typing import TYPE_CHECKING, Any

from docflow.core.exceptions import CompletionFailed, DocflowError
from docflow.core.observability import observe
from docflow.skills.base import SkillDescriptor, SkillKey

if TYPE_CHECKING:
    from docflow.core.context import ContextVariables
    from docflow.core.llm.clients import CompletionServices

logger = logging.getLogger(__name__)


def template_variables(*templates: str) -> tuple[str, ...]:
    """Placeholder names used in *templates*, in first-seen order."""
    names: list[str] = []
    seen: set[str] = set()
    for template in templates:
        for _, field_name, _, _ in Formatter().parse(template):
            if field_name and field_name.lower() not in seen:
                seen.add(field_name.lower())
                names.append(field_name)
    return tuple(names)


class _TemplateValues(dict):
    """``format_map`` source that reads straight from a context."""

    def __init__(self, context: ContextVariables):
        super().__init__()
        self._context = context

    def __missing__(self, key: str) -> str:
        return self._context.get(key)


class SemanticSkill:
    def __init__(self, key: SkillKey, template: dict[str, Any], completions: CompletionServices):
        self.key = key
        self._prompt: str = template["prompt"]
        self._system: str = template.get("system_prompt") or ""
        self._description: str = template.get("description") or ""
        self._service_id: str | None = template.get("service_id")
        self._max_tokens = int(template.get("max_tokens", 1024))
        temperature = template.get("temperature")
        self._temperature = float(temperature) if temperature is not None else None
        self._completions = completions
        self._variables = template_variables(self._system, self._prompt)

    @property
    def descriptor(self) -> SkillDescriptor:
        return SkillDescriptor(
            collection=self.key.collection,
            name=self.key.skill_name,
            description=self._description,
            required_variables=self._variables,
        )

    def render(self, context: ContextVariables) -> tuple[str, str]:
        """Return ``(system, prompt)`` filled from *context*."""
        context.require(self._variables, self.key.qualified_name)
        values = _TemplateValues(context)
        return self._system.format_map(values), self._prompt.format_map(values)

    @observe(name="semantic_skill")
    async def invoke(self, context: ContextVariables) -> ContextVariables:
        system, prompt = self.render(context)
        service = self._completions.get(self._service_id)
        logger.info("Invoking semantic skill %s via %s", self.key.qualified_name, service.service_id)

        try:
            text = await service.complete(
                prompt, system=system, max_tokens=self._max_tokens, temperature=self._temperature
            )
        except DocflowError:
            raise
        except Exception as e:
            raise CompletionFailed(e) from e

        if not text or not text.strip():
            raise CompletionFailed(f"{self.key.qualified_name} returned an empty completion")
        return context.update(text.strip())
