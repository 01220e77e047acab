from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from docflow.core.exceptions import SkillNotFound
from docflow.skills.base import Skill, SkillKey
from docflow.skills.prompt_loader import load_collection
from docflow.skills.semantic import SemanticSkill

if TYPE_CHECKING:
    from docflow.core.llm.clients import CompletionServices

logger = logging.getLogger(__name__)


class SkillRegistry:
    """Skills by ``SkillKey``; the set of keys is closed."""

    def __init__(self) -> None:
        self._skills: dict[SkillKey, Skill] = {}

    def register(self, skill: Skill) -> None:
        if skill.key in self._skills:
            logger.warning("Replacing registered skill %s", skill.key.qualified_name)
        self._skills[skill.key] = skill

    def import_skills(self, skills: Iterable[Skill]) -> None:
        for skill in skills:
            self.register(skill)

    def import_semantic_skills_from_directory(
        self, skills_dir: Path, collection: str, completions: CompletionServices
    ) -> dict[str, Skill]:
        """Load ``skills_dir/collection/*/prompts.yaml`` as semantic skills.

        Templates whose (collection, name) is not a known ``SkillKey`` are
        skipped with a warning.
        """
        loaded: dict[str, Skill] = {}
        for name, template in load_collection(skills_dir, collection).items():
            key = SkillKey.lookup(collection, name)
            if key is None:
                logger.warning("Ignoring unknown semantic skill %s.%s", collection, name)
                continue
            skill = SemanticSkill(key, template, completions)
            self.register(skill)
            loaded[name] = skill
        return loaded

    def get(self, key: SkillKey) -> Skill:
        try:
            return self._skills[key]
        except KeyError as exc:
            raise SkillNotFound(f"Skill not registered: {key.qualified_name}") from exc

    def __contains__(self, key: object) -> bool:
        return key in self._skills

    def all_skills(self) -> list[Skill]:
        return list(self._skills.values())

    def validate(self, keys: Iterable[SkillKey]) -> None:
        """Raise ``SkillNotFound`` listing every key that is not registered."""
        missing = [k.qualified_name for k in keys if k not in self._skills]
        if missing:
            raise SkillNotFound(f"Skills not registered: {', '.join(missing)}")
