"""Plan executor: runs skills in order, piping each result into the next step.

Every step gets its own fresh ``ContextVariables``: either the one the step
carries explicitly, or a new one seeded with the step's default input, or
with the previous step's ``result()``. Nothing else leaks between steps.
The first failure aborts the rest of the plan; there is no rollback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from docflow.core.context import ContextVariables
from docflow.core.observability import observe
from docflow.skills.base import SkillKey
from docflow.skills.registry import SkillRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanStep:
    """One skill invocation.

    ``context`` wins over ``default_input``; with neither, the step is fed
    the previous step's result.
    """

    skill: SkillKey
    context: ContextVariables | None = None
    default_input: str | None = None

    def seed(self, previous_result: str) -> ContextVariables:
        if self.context is not None:
            return self.context
        if self.default_input is not None:
            return ContextVariables.create(self.default_input)
        return ContextVariables.create(previous_result)


class Orchestrator:
    def __init__(self, registry: SkillRegistry):
        self._registry = registry

    @observe(name="orchestrator.run")
    async def run(
        self, initial_input: str | ContextVariables, *steps: PlanStep | SkillKey
    ) -> ContextVariables:
        """Run *steps* in order and return the last step's context."""
        if not steps:
            raise ValueError("A plan needs at least one step")
        plan = [s if isinstance(s, PlanStep) else PlanStep(s) for s in steps]
        # Resolve everything up front so an unknown skill fails before any side effect.
        self._registry.validate(step.skill for step in plan)

        if isinstance(initial_input, ContextVariables):
            context = initial_input
            previous = initial_input.result()
        else:
            context = None
            previous = initial_input

        for index, step in enumerate(plan):
            if index == 0 and context is not None and step.context is None and step.default_input is None:
                step_context = context
            else:
                step_context = step.seed(previous)

            skill = self._registry.get(step.skill)
            logger.info("Step %d/%d: %s", index + 1, len(plan), step.skill.qualified_name)
            try:
                context = await skill.invoke(step_context)
            except Exception:
                logger.error(
                    "Step %d/%d (%s) failed, skipping %d remaining",
                    index + 1,
                    len(plan),
                    step.skill.qualified_name,
                    len(plan) - index - 1,
                )
                raise
            previous = context.result()

        return context
