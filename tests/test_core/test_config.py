"""Tests for Settings."""

import pytest

from docflow.core.config import DEFAULT_SEMANTIC_SKILLS_DIR, Settings, get_settings
from docflow.core.exceptions import ConfigurationError


def _settings(**overrides) -> Settings:
    values = {
        "msgraph_client_id": "client",
        "onedrive_path_to_file": "/Reports/Q3.docx",
        "openai_api_key": "key",
        "anthropic_api_key": "",
        "azure_openai_api_key": "",
        "azure_openai_endpoint": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_scopes_split_and_trimmed():
    s = _settings(msgraph_scopes=" Files.Read , Mail.Send,,")
    assert s.scopes == ["Files.Read", "Mail.Send"]


def test_valid_settings_pass():
    _settings().validate_for_run()


def test_missing_client_id():
    with pytest.raises(ConfigurationError, match="MSGRAPH_CLIENT_ID"):
        _settings(msgraph_client_id="").validate_for_run()


def test_missing_file_path():
    with pytest.raises(ConfigurationError, match="ONEDRIVE_PATH_TO_FILE"):
        _settings(onedrive_path_to_file="").validate_for_run()


def test_missing_completion_backend():
    with pytest.raises(ConfigurationError, match="completion"):
        _settings(openai_api_key="", anthropic_api_key="", azure_openai_api_key="").validate_for_run()


def test_azure_needs_endpoint():
    s = _settings(openai_api_key="", azure_openai_api_key="k", azure_openai_endpoint="")
    with pytest.raises(ConfigurationError):
        s.validate_for_run()


def test_weekday_out_of_range():
    with pytest.raises(ConfigurationError, match="FOLLOWUP_WEEKDAY"):
        _settings(followup_weekday=7).validate_for_run()


def test_default_semantic_skills_dir_ships_summarize():
    assert (DEFAULT_SEMANTIC_SKILLS_DIR / "SummarizeSkill" / "Summarize" / "prompts.yaml").exists()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FOLLOWUP_HOUR", "14")
    monkeypatch.setenv("MSGRAPH_TENANT_ID", "contoso")
    s = Settings(_env_file=None)
    assert s.followup_hour == 14
    assert s.msgraph_tenant_id == "contoso"


def test_get_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("MSGRAPH_CLIENT_ID", "test-client")
    monkeypatch.setenv("ONEDRIVE_PATH_TO_FILE", "/Reports/Q3.docx")
    s = get_settings()
    assert s.msgraph_client_id == "test-client"
    assert s.onedrive_path_to_file == "/Reports/Q3.docx"


def test_exported_backend_keys_do_not_leak_into_tests(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "from-shell")
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "from-shell")
    monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "https://shell.openai.azure.com")
    with pytest.raises(ConfigurationError, match="completion"):
        _settings(openai_api_key="").validate_for_run()


def test_dotenv_file_is_ignored(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("FOLLOWUP_HOUR=23\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FOLLOWUP_HOUR", raising=False)
    assert _settings().followup_hour == 9
