from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from docflow.core.exceptions import DocflowError, ExternalCallFailed
from docflow.core.observability import observe

if TYPE_CHECKING:
    from docflow.core.context import ContextVariables
    from docflow.core.credentials import CredentialBroker, TokenRequest

logger = logging.getLogger(__name__)


class SkillKey(Enum):
    """Every skill a plan may reference, as (collection, skill name)."""

    ONEDRIVE_GET_FILE_CONTENT = ("onedrive", "GetFileContent")
    ONEDRIVE_CREATE_LINK = ("onedrive", "CreateLink")
    OUTLOOK_GET_MY_EMAIL_ADDRESS = ("outlook", "GetMyEmailAddress")
    OUTLOOK_SEND_EMAIL = ("outlook", "SendEmail")
    TODO_ADD_TASK = ("todo", "AddTask")
    CALENDAR_ADD_EVENT = ("calendar", "AddEvent")
    SUMMARIZE = ("SummarizeSkill", "Summarize")

    @property
    def collection(self) -> str:
        return self.value[0]

    @property
    def skill_name(self) -> str:
        return self.value[1]

    @property
    def qualified_name(self) -> str:
        return f"{self.collection}.{self.skill_name}"

    @classmethod
    def lookup(cls, collection: str, skill_name: str) -> SkillKey | None:
        wanted = (collection.lower(), skill_name.lower())
        for key in cls:
            if (key.collection.lower(), key.skill_name.lower()) == wanted:
                return key
        return None


@dataclass(frozen=True)
class SkillDescriptor:
    collection: str
    name: str
    description: str
    required_variables: tuple[str, ...]
    produces_output: bool = True


class Skill(Protocol):
    """Interface shared by native and semantic skills."""

    key: SkillKey

    @property
    def descriptor(self) -> SkillDescriptor: ...

    async def invoke(self, context: ContextVariables) -> ContextVariables: ...


class NativeSkill:
    """Skill backed by an authenticated Microsoft Graph call.

    Subclasses declare ``key``, ``required_variables`` and implement
    ``_call``, which receives a fresh bearer token and returns the primary
    output. Skills whose result is only an acknowledgement set
    ``produces_output = False``; for the others an empty result is a failure.
    """

    key: SkillKey
    description: str = ""
    required_variables: tuple[str, ...] = ()
    produces_output: bool = True

    def __init__(self, broker: CredentialBroker, token_request: TokenRequest):
        self._broker = broker
        self._token_request = token_request

    @property
    def descriptor(self) -> SkillDescriptor:
        return SkillDescriptor(
            collection=self.key.collection,
            name=self.key.skill_name,
            description=self.description,
            required_variables=self.required_variables,
            produces_output=self.produces_output,
        )

    @observe(name="native_skill")
    async def invoke(self, context: ContextVariables) -> ContextVariables:
        name = self.key.qualified_name
        context.require(self.required_variables, name)
        token = await self._broker.get_token(self._token_request)

        logger.info("Invoking native skill %s", name)
        try:
            value = await self._call(context, token)
        except DocflowError:
            raise
        except Exception as e:
            raise ExternalCallFailed(name, e) from e

        if value is None:
            raise ExternalCallFailed(name, "call returned no result")
        if not value:
            if self.produces_output:
                raise ExternalCallFailed(name, "call returned an empty result")
            logger.warning("Native skill %s returned an empty acknowledgement", name)
        return context.update(value)

    async def _call(self, context: ContextVariables, token: str) -> str | None:
        raise NotImplementedError
