"""Outlook calendar skill: add an event."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from docflow.core.context import INPUT
from docflow.skills.base import NativeSkill, SkillKey

if TYPE_CHECKING:
    from docflow.core.context import ContextVariables
    from docflow.core.credentials import CredentialBroker, TokenRequest
    from docflow.tools.ms_graph import OutlookCalendarConnector

START = "start"
END = "end"


class AddEventSkill(NativeSkill):
    key = SkillKey.CALENDAR_ADD_EVENT
    description = "Add a calendar event; input is the subject, start and end are ISO-8601."
    required_variables = (INPUT, START, END)

    def __init__(self, connector: OutlookCalendarConnector, broker: CredentialBroker, token_request: TokenRequest):
        super().__init__(broker, token_request)
        self._connector = connector

    async def _call(self, context: ContextVariables, token: str) -> str:
        start = datetime.fromisoformat(context.get(START))
        end = datetime.fromisoformat(context.get(END))
        return await self._connector.add_event(context.result(), start, end, token=token)


def create_skills(
    connector: OutlookCalendarConnector, broker: CredentialBroker, token_request: TokenRequest
) -> list[NativeSkill]:
    return [AddEventSkill(connector, broker, token_request)]
