"""Microsoft To Do skill: add a task with an optional reminder."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from docflow.core.context import INPUT
from docflow.skills.base import NativeSkill, SkillKey

if TYPE_CHECKING:
    from docflow.core.context import ContextVariables
    from docflow.core.credentials import CredentialBroker, TokenRequest
    from docflow.tools.ms_graph import TodoConnector

REMINDER = "reminder"


class AddTaskSkill(NativeSkill):
    key = SkillKey.TODO_ADD_TASK
    description = "Add a task; input is the title, optional reminder is an ISO-8601 timestamp."
    required_variables = (INPUT,)

    def __init__(self, connector: TodoConnector, broker: CredentialBroker, token_request: TokenRequest):
        super().__init__(broker, token_request)
        self._connector = connector

    async def _call(self, context: ContextVariables, token: str) -> str:
        reminder = datetime.fromisoformat(context.get(REMINDER)) if REMINDER in context else None
        return await self._connector.add_task(context.result(), reminder, token=token)


def create_skills(
    connector: TodoConnector, broker: CredentialBroker, token_request: TokenRequest
) -> list[NativeSkill]:
    return [AddTaskSkill(connector, broker, token_request)]
