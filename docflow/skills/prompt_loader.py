"""YAML prompt loader with startup validation and caching.

Semantic skills live in a directory tree laid out as
``<root>/<Collection>/<SkillName>/prompts.yaml``::

    description: Summarize a document.
    system_prompt: You are a concise assistant.
    prompt: |
      Summarize this:
      {input}
    max_tokens: 512

``prompt`` is required; ``{name}`` placeholders in ``prompt`` and
``system_prompt`` are filled from the skill's context variables.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

PROMPT_FILE = "prompts.yaml"

_cache: dict[str, dict[str, Any]] = {}


def load_prompt(skill_dir: Path) -> dict[str, Any]:
    """Load ``prompts.yaml`` for a skill directory.

    Returns the parsed dict or ``{}`` when no YAML file exists.
    Results are cached by directory string so each file is read only once.
    """
    key = str(skill_dir)
    if key not in _cache:
        yaml_path = skill_dir / PROMPT_FILE
        if yaml_path.exists():
            try:
                _cache[key] = yaml.safe_load(yaml_path.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as exc:
                logger.error("Failed to parse %s: %s", yaml_path, exc)
                _cache[key] = {}
        else:
            _cache[key] = {}
    return _cache[key]


def load_collection(skills_dir: Path, collection: str) -> dict[str, dict[str, Any]]:
    """Load every skill template under ``skills_dir/collection``, keyed by skill name."""
    collection_dir = skills_dir / collection
    if not collection_dir.is_dir():
        raise FileNotFoundError(f"Semantic skill collection not found: {collection_dir}")

    templates: dict[str, dict[str, Any]] = {}
    for skill_dir in sorted(p for p in collection_dir.iterdir() if p.is_dir()):
        data = load_prompt(skill_dir)
        if "prompt" not in data:
            logger.warning("Skipping %s: no usable %s", skill_dir, PROMPT_FILE)
            continue
        templates[skill_dir.name] = data
    return templates


def validate_all_prompts(skills_dir: Path) -> list[str]:
    """Validate every ``prompts.yaml`` found under *skills_dir*.

    Returns a list of human-readable error strings (empty = all good).
    Called at startup to catch typos early.
    """
    errors: list[str] = []
    for yaml_path in skills_dir.rglob(PROMPT_FILE):
        try:
            data = yaml.safe_load(yaml_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                errors.append(f"{yaml_path}: expected a YAML mapping, got {type(data).__name__}")
                continue
            if not isinstance(data.get("prompt"), str) or not data["prompt"].strip():
                errors.append(f"{yaml_path}: missing required 'prompt' key")
        except yaml.YAMLError as exc:
            errors.append(f"{yaml_path}: {exc}")
    return errors


def clear_cache() -> None:
    """Clear the prompt cache (useful for tests)."""
    _cache.clear()
