"""Follow-up orchestrator graph nodes.

Each node runs one slice of the plan through the ``Orchestrator`` and
returns the state keys it produced. Confirmation lines go to ``notify``
right after a side effect succeeds.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from docflow.core.context import ContextVariables
from docflow.core.schedule import follow_up_window
from docflow.orchestrators.followup.state import FollowUpState
from docflow.orchestrators.pipeline import Orchestrator, PlanStep
from docflow.skills.base import SkillKey
from docflow.skills.calendar.handler import END as EVENT_END
from docflow.skills.calendar.handler import START as EVENT_START
from docflow.skills.outlook.handler import RECIPIENTS, SUBJECT
from docflow.skills.todo.handler import REMINDER

logger = logging.getLogger(__name__)


def email_subject(path: str) -> str:
    return f"Summary of {path}"


def email_body(summary: str, link: str) -> str:
    return f"{summary}\n\n{link}"


def follow_up_title(path: str) -> str:
    return f"Follow-up about {path}."


class FollowUpNodes:
    def __init__(
        self,
        orchestrator: Orchestrator,
        clock: Callable[[], datetime],
        weekday: int = 0,
        hour: int = 9,
        notify: Callable[[str], Any] = print,
    ):
        self._orchestrator = orchestrator
        self._clock = clock
        self._weekday = weekday
        self._hour = hour
        self._notify = notify

    async def summarize(self, state: FollowUpState) -> dict[str, Any]:
        result = await self._orchestrator.run(
            state["path"], SkillKey.ONEDRIVE_GET_FILE_CONTENT, SkillKey.SUMMARIZE
        )
        return {"summary": result.result()}

    async def lookup_address(self, state: FollowUpState) -> dict[str, Any]:
        result = await self._orchestrator.run("", SkillKey.OUTLOOK_GET_MY_EMAIL_ADDRESS)
        return {"my_email": result.result()}

    async def share_link(self, state: FollowUpState) -> dict[str, Any]:
        result = await self._orchestrator.run(state["path"], SkillKey.ONEDRIVE_CREATE_LINK)
        return {"share_link": result.result()}

    async def send_email(self, state: FollowUpState) -> dict[str, Any]:
        path, my_email = state["path"], state["my_email"]
        memory = ContextVariables.create(email_body(state["summary"], state["share_link"]))
        memory.set(RECIPIENTS, my_email)
        memory.set(SUBJECT, email_subject(path))
        result = await self._orchestrator.run("", PlanStep(SkillKey.OUTLOOK_SEND_EMAIL, context=memory))

        self._notify(f"Sent email to {my_email} with summary of {path}.")
        return {"email_sent_to": result.result()}

    async def add_task(self, state: FollowUpState) -> dict[str, Any]:
        path = state["path"]
        start, end = follow_up_window(self._clock(), self._weekday, self._hour)
        logger.info("Follow-up scheduled for %s", start.isoformat())

        memory = ContextVariables.create(follow_up_title(path))
        memory.set(REMINDER, start.isoformat())
        result = await self._orchestrator.run("", PlanStep(SkillKey.TODO_ADD_TASK, context=memory))

        self._notify(f"Added a reminder on To Do to follow-up next week about {path}.")
        return {
            "task_id": result.result(),
            "follow_up_start": start.isoformat(),
            "follow_up_end": end.isoformat(),
        }

    async def add_event(self, state: FollowUpState) -> dict[str, Any]:
        path = state["path"]
        memory = ContextVariables.create(follow_up_title(path))
        memory.set(EVENT_START, state["follow_up_start"])
        memory.set(EVENT_END, state["follow_up_end"])
        result = await self._orchestrator.run("", PlanStep(SkillKey.CALENDAR_ADD_EVENT, context=memory))

        self._notify(f"Added a calendar event to follow-up next week about {path}.")
        return {"event_id": result.result()}
