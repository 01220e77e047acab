"""Outlook mail skills: look up the signed-in address and send mail."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from docflow.core.context import INPUT
from docflow.skills.base import NativeSkill, SkillKey

if TYPE_CHECKING:
    from docflow.core.context import ContextVariables
    from docflow.core.credentials import CredentialBroker, TokenRequest
    from docflow.tools.ms_graph import OutlookMailConnector

RECIPIENTS = "recipients"
SUBJECT = "subject"


def split_recipients(raw: str) -> list[str]:
    """Addresses from a ``,`` or ``;`` separated string."""
    return [r.strip() for r in re.split(r"[,;]", raw) if r.strip()]


class GetMyEmailAddressSkill(NativeSkill):
    key = SkillKey.OUTLOOK_GET_MY_EMAIL_ADDRESS
    description = "Get the email address of the signed-in user."

    def __init__(self, connector: OutlookMailConnector, broker: CredentialBroker, token_request: TokenRequest):
        super().__init__(broker, token_request)
        self._connector = connector

    async def _call(self, context: ContextVariables, token: str) -> str:
        return await self._connector.get_my_email_address(token=token)


class SendEmailSkill(NativeSkill):
    key = SkillKey.OUTLOOK_SEND_EMAIL
    description = "Send an email; input is the body, recipients and subject are variables."
    required_variables = (INPUT, RECIPIENTS, SUBJECT)
    produces_output = False

    def __init__(self, connector: OutlookMailConnector, broker: CredentialBroker, token_request: TokenRequest):
        super().__init__(broker, token_request)
        self._connector = connector

    async def _call(self, context: ContextVariables, token: str) -> str:
        recipients = split_recipients(context.get(RECIPIENTS))
        if not recipients:
            raise ValueError("No email recipients given")
        await self._connector.send_email(
            recipients, context.get(SUBJECT), context.result(), token=token
        )
        return ", ".join(recipients)


def create_skills(
    connector: OutlookMailConnector, broker: CredentialBroker, token_request: TokenRequest
) -> list[NativeSkill]:
    return [
        GetMyEmailAddressSkill(connector, broker, token_request),
        SendEmailSkill(connector, broker, token_request),
    ]
