"""Follow-up orchestrator: LangGraph StateGraph.

Nodes: summarize → lookup_address → share_link → send_email → add_task → add_event

A strictly linear graph: any node that raises aborts the run, so a failed
email means no task and no event.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from langgraph.graph import END, StateGraph

from docflow.orchestrators.followup.nodes import FollowUpNodes
from docflow.orchestrators.followup.state import FollowUpState
from docflow.orchestrators.pipeline import Orchestrator
from docflow.skills.base import SkillKey
from docflow.skills.registry import SkillRegistry

logger = logging.getLogger(__name__)

NODE_ORDER = ("summarize", "lookup_address", "share_link", "send_email", "add_task", "add_event")

# Skills the plan touches, in execution order.
PLAN_SKILLS = (
    SkillKey.ONEDRIVE_GET_FILE_CONTENT,
    SkillKey.SUMMARIZE,
    SkillKey.OUTLOOK_GET_MY_EMAIL_ADDRESS,
    SkillKey.ONEDRIVE_CREATE_LINK,
    SkillKey.OUTLOOK_SEND_EMAIL,
    SkillKey.TODO_ADD_TASK,
    SkillKey.CALENDAR_ADD_EVENT,
)


def build_followup_graph(nodes: FollowUpNodes) -> StateGraph:
    """Build the follow-up orchestrator graph."""
    graph = StateGraph(FollowUpState)

    for name in NODE_ORDER:
        graph.add_node(name, getattr(nodes, name))

    graph.set_entry_point(NODE_ORDER[0])
    for current, following in zip(NODE_ORDER, NODE_ORDER[1:]):
        graph.add_edge(current, following)
    graph.add_edge(NODE_ORDER[-1], END)

    return graph


class FollowUpOrchestrator:
    """Summarize a OneDrive file, mail it to myself, and schedule a follow-up."""

    def __init__(
        self,
        registry: SkillRegistry,
        clock: Callable[[], datetime],
        weekday: int = 0,
        hour: int = 9,
        notify: Callable[[str], Any] = print,
    ):
        registry.validate(PLAN_SKILLS)
        nodes = FollowUpNodes(Orchestrator(registry), clock, weekday, hour, notify)
        self._graph = build_followup_graph(nodes).compile()

    async def invoke(self, path: str) -> FollowUpState:
        logger.info("Running follow-up plan for %s", path)
        initial_state: FollowUpState = {"path": path}
        return await self._graph.ainvoke(initial_state)
