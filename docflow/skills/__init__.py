from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from docflow.skills.calendar.handler import create_skills as calendar_skills
from docflow.skills.onedrive.handler import create_skills as onedrive_skills
from docflow.skills.outlook.handler import create_skills as outlook_skills
from docflow.skills.registry import SkillRegistry
from docflow.skills.todo.handler import create_skills as todo_skills
from docflow.tools.ms_graph import (
    GraphClient,
    OneDriveConnector,
    OutlookCalendarConnector,
    OutlookMailConnector,
    TodoConnector,
)

if TYPE_CHECKING:
    from docflow.core.credentials import CredentialBroker, TokenRequest
    from docflow.core.llm.clients import CompletionServices

SEMANTIC_COLLECTIONS = ("SummarizeSkill",)


def create_registry(
    graph: GraphClient,
    broker: CredentialBroker,
    token_request: TokenRequest,
    completions: CompletionServices,
    semantic_skills_dir: Path,
) -> SkillRegistry:
    """Create and populate the skill registry."""
    registry = SkillRegistry()
    registry.import_skills(onedrive_skills(OneDriveConnector(graph), broker, token_request))
    registry.import_skills(outlook_skills(OutlookMailConnector(graph), broker, token_request))
    registry.import_skills(todo_skills(TodoConnector(graph), broker, token_request))
    registry.import_skills(calendar_skills(OutlookCalendarConnector(graph), broker, token_request))
    for collection in SEMANTIC_COLLECTIONS:
        registry.import_semantic_skills_from_directory(semantic_skills_dir, collection, completions)
    return registry
