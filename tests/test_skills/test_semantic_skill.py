"""Tests for semantic (prompt template) skills."""

import pytest

from docflow.core.context import ContextVariables
from docflow.core.exceptions import CompletionFailed, MissingVariable
from docflow.skills.base import SkillKey
from docflow.skills.semantic import SemanticSkill, template_variables

TEMPLATE = {
    "description": "Summarize",
    "system_prompt": "Write in {language}.",
    "prompt": "Summarize:\n{input}\n{{not a variable}}",
    "max_tokens": 256,
    "temperature": 0.2,
}


def test_template_variables_in_order_and_deduplicated():
    assert template_variables("{a} {b}", "{A} {c}") == ("a", "b", "c")
    assert template_variables("{{escaped}} {input}") == ("input",)


async def test_invoke_renders_prompt_and_returns_completion(completions, completion):
    skill = SemanticSkill(SkillKey.SUMMARIZE, TEMPLATE, completions)
    ctx = ContextVariables.create("Q3 results...").set("Language", "English")

    result = await skill.invoke(ctx)

    assert result.result() == "A summary."
    call = completion.calls[0]
    assert call["system"] == "Write in English."
    assert call["prompt"] == "Summarize:\nQ3 results...\n{not a variable}"
    assert call["max_tokens"] == 256
    assert call["temperature"] == 0.2


async def test_missing_template_variable_fails_before_completion(completions, completion):
    skill = SemanticSkill(SkillKey.SUMMARIZE, TEMPLATE, completions)

    with pytest.raises(MissingVariable, match="language"):
        await skill.invoke(ContextVariables.create("text"))
    assert completion.calls == []


async def test_empty_completion_fails(completions, completion):
    completion.reply = "   "
    skill = SemanticSkill(SkillKey.SUMMARIZE, {"prompt": "{input}"}, completions)

    with pytest.raises(CompletionFailed, match="empty"):
        await skill.invoke(ContextVariables.create("text"))


async def test_backend_error_is_completion_failed(completions, completion):
    completion.error = RuntimeError("timeout")
    skill = SemanticSkill(SkillKey.SUMMARIZE, {"prompt": "{input}"}, completions)

    with pytest.raises(CompletionFailed) as exc_info:
        await skill.invoke(ContextVariables.create("text"))
    assert isinstance(exc_info.value.cause, RuntimeError)


async def test_completion_is_stripped(completions, completion):
    completion.reply = "\n  Q3 summary \n"
    skill = SemanticSkill(SkillKey.SUMMARIZE, {"prompt": "{input}"}, completions)
    result = await skill.invoke(ContextVariables.create("text"))
    assert result.result() == "Q3 summary"


class _EchoCompletion:
    service_id = "echo"

    async def complete(self, prompt, *, system="", max_tokens=1024, temperature=None):
        return f"echo: {prompt}"


async def test_template_service_id_selects_backend(completions, completion):
    completions.add(_EchoCompletion())
    skill = SemanticSkill(SkillKey.SUMMARIZE, {"prompt": "{input}", "service_id": "echo"}, completions)

    result = await skill.invoke(ContextVariables.create("hi"))

    assert result.result() == "echo: hi"
    assert completion.calls == []


def test_descriptor_reports_template_variables(completions):
    skill = SemanticSkill(SkillKey.SUMMARIZE, TEMPLATE, completions)
    assert skill.descriptor.required_variables == ("language", "input")
    assert skill.descriptor.description == "Summarize"
