"""OneDrive skills: read a file's text and create a share link for it."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docflow.core.context import INPUT
from docflow.skills.base import NativeSkill, SkillKey

if TYPE_CHECKING:
    from docflow.core.context import ContextVariables
    from docflow.core.credentials import CredentialBroker, TokenRequest
    from docflow.tools.ms_graph import OneDriveConnector


class GetFileContentSkill(NativeSkill):
    key = SkillKey.ONEDRIVE_GET_FILE_CONTENT
    description = "Get the text content of a OneDrive file; input is the file path."
    required_variables = (INPUT,)

    def __init__(self, connector: OneDriveConnector, broker: CredentialBroker, token_request: TokenRequest):
        super().__init__(broker, token_request)
        self._connector = connector

    async def _call(self, context: ContextVariables, token: str) -> str:
        return await self._connector.get_file_content(context.result(), token=token)


class CreateLinkSkill(NativeSkill):
    key = SkillKey.ONEDRIVE_CREATE_LINK
    description = "Create a view-only share link for a OneDrive file; input is the file path."
    required_variables = (INPUT,)

    def __init__(self, connector: OneDriveConnector, broker: CredentialBroker, token_request: TokenRequest):
        super().__init__(broker, token_request)
        self._connector = connector

    async def _call(self, context: ContextVariables, token: str) -> str:
        return await self._connector.create_share_link(context.result(), token=token)


def create_skills(
    connector: OneDriveConnector, broker: CredentialBroker, token_request: TokenRequest
) -> list[NativeSkill]:
    return [
        GetFileContentSkill(connector, broker, token_request),
        CreateLinkSkill(connector, broker, token_request),
    ]
