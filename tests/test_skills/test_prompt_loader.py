"""Tests for YAML prompt loader."""

from docflow.core.config import DEFAULT_SEMANTIC_SKILLS_DIR
from docflow.skills.prompt_loader import (
    clear_cache,
    load_collection,
    load_prompt,
    validate_all_prompts,
)

SUMMARIZE_DIR = DEFAULT_SEMANTIC_SKILLS_DIR / "SummarizeSkill" / "Summarize"


def test_load_prompt_returns_dict_for_existing_yaml():
    clear_cache()
    result = load_prompt(SUMMARIZE_DIR)
    assert isinstance(result, dict)
    assert "{input}" in result["prompt"]
    assert result["name"] == "Summarize"


def test_load_prompt_returns_empty_dict_for_missing_yaml(tmp_path):
    clear_cache()
    assert load_prompt(tmp_path / "nonexistent_skill_xyz") == {}


def test_load_prompt_caches_result():
    clear_cache()
    first = load_prompt(SUMMARIZE_DIR)
    second = load_prompt(SUMMARIZE_DIR)
    assert first is second


def test_load_prompt_bad_yaml_returns_empty(tmp_path):
    clear_cache()
    (tmp_path / "prompts.yaml").write_text("prompt: [unclosed\n")
    assert load_prompt(tmp_path) == {}


def test_shipped_prompts_are_valid():
    errors = validate_all_prompts(DEFAULT_SEMANTIC_SKILLS_DIR)
    assert errors == [], f"Prompt validation errors: {errors}"


def test_validate_reports_missing_prompt(tmp_path):
    skill_dir = tmp_path / "Coll" / "Broken"
    skill_dir.mkdir(parents=True)
    (skill_dir / "prompts.yaml").write_text("description: no prompt here\n")
    (tmp_path / "Coll" / "List").mkdir()
    (tmp_path / "Coll" / "List" / "prompts.yaml").write_text("- a\n- b\n")

    errors = validate_all_prompts(tmp_path)

    assert len(errors) == 2
    assert any("missing required 'prompt'" in e for e in errors)
    assert any("expected a YAML mapping" in e for e in errors)


def test_load_collection_skips_dirs_without_prompt(tmp_path):
    clear_cache()
    (tmp_path / "Coll" / "Good").mkdir(parents=True)
    (tmp_path / "Coll" / "Good" / "prompts.yaml").write_text("prompt: hi {input}\n")
    (tmp_path / "Coll" / "Empty").mkdir()

    assert list(load_collection(tmp_path, "Coll")) == ["Good"]
