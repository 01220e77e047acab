"""Tests for ContextVariables."""

import pytest

from docflow.core.context import ContextVariables
from docflow.core.exceptions import InvalidVariableName, MissingVariable


def test_create_sets_only_input():
    ctx = ContextVariables.create("hello")
    assert ctx.result() == "hello"
    assert list(ctx) == [("input", "hello")]


def test_set_and_get_case_insensitive():
    ctx = ContextVariables.create()
    ctx.set("Recipients", "me@example.com")
    assert ctx.get("recipients") == "me@example.com"
    assert ctx.get("RECIPIENTS") == "me@example.com"
    assert "rEcIpIeNtS" in ctx


def test_set_overwrites_without_duplicating():
    ctx = ContextVariables.create()
    ctx.set("subject", "one")
    ctx.set("Subject", "two")
    assert ctx.get("subject") == "two"
    assert len(ctx) == 2


def test_set_empty_name_raises():
    ctx = ContextVariables.create()
    with pytest.raises(InvalidVariableName):
        ctx.set("", "x")
    with pytest.raises(InvalidVariableName):
        ctx.set("   ", "x")


def test_get_missing_raises():
    ctx = ContextVariables.create()
    with pytest.raises(MissingVariable) as exc_info:
        ctx.get("start")
    assert exc_info.value.name == "start"


def test_require_names_skill():
    ctx = ContextVariables.create("body").set("subject", "s")
    with pytest.raises(MissingVariable) as exc_info:
        ctx.require(["input", "subject", "recipients"], "outlook.SendEmail")
    assert exc_info.value.name == "recipients"
    assert "outlook.SendEmail" in str(exc_info.value)


def test_update_replaces_result():
    ctx = ContextVariables.create("before")
    ctx.update("after")
    assert ctx.result() == "after"
    assert ctx.get("input") == "after"


def test_iteration_keeps_insertion_order():
    ctx = ContextVariables.create("x").set("b", "2").set("a", "1")
    assert [name for name, _ in ctx] == ["input", "b", "a"]


def test_copy_is_independent():
    ctx = ContextVariables.create("x").set("a", "1")
    clone = ctx.copy()
    clone.set("a", "2").update("y")
    assert ctx.get("a") == "1"
    assert ctx.result() == "x"


def test_contains_rejects_non_strings():
    ctx = ContextVariables.create()
    assert 1 not in ctx
    assert "" not in ctx


def test_iteration_keeps_caller_spelling():
    ctx = ContextVariables.create("x").set("ReminderAt", "9")
    assert list(ctx) == [("input", "x"), ("ReminderAt", "9")]


def test_overwrite_takes_latest_spelling():
    ctx = ContextVariables.create().set("subject", "one").set(" SUBJECT ", "two")
    assert dict(ctx)["SUBJECT"] == "two"
    assert len(ctx) == 2


def test_copy_keeps_spelling():
    ctx = ContextVariables.create().set("StartTime", "t")
    assert ("StartTime", "t") in list(ctx.copy())
