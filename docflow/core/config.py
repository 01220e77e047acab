from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from docflow.core.exceptions import ConfigurationError

DEFAULT_SEMANTIC_SKILLS_DIR = Path(__file__).resolve().parent.parent / "semantic_skills"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Microsoft Graph (delegated auth)
    msgraph_client_id: str = ""
    msgraph_tenant_id: str = "common"
    msgraph_scopes: str = "User.Read,Files.ReadWrite,Mail.Send,Tasks.ReadWrite,Calendars.ReadWrite"
    msgraph_redirect_uri: str = "http://localhost"
    msgraph_base_url: str = "https://graph.microsoft.com/v1.0"
    msgraph_token_cache_path: Path = Path.home() / ".docflow" / "msal_token_cache.json"
    msgraph_timeout_seconds: int = 30

    # Azure OpenAI
    azure_openai_deployment_name: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_api_key: str = ""
    azure_openai_api_version: str = "2024-06-01"
    azure_openai_service_id: str = "azure-openai"

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_service_id: str = "openai"

    # Anthropic
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-6"
    anthropic_service_id: str = "anthropic"

    default_completion_service_id: str = "azure-openai"

    # Workflow
    onedrive_path_to_file: str = ""
    semantic_skills_dir: Path = DEFAULT_SEMANTIC_SKILLS_DIR
    followup_weekday: int = 0  # Monday
    followup_hour: int = 9
    timezone: str = "America/New_York"

    # Langfuse
    langfuse_secret_key: str = ""
    langfuse_public_key: str = ""
    langfuse_host: str = "http://localhost:3000"

    # App
    app_env: str = "development"
    log_level: str = "INFO"

    @property
    def scopes(self) -> list[str]:
        """Requested Graph scopes as a list, blanks dropped."""
        return [s.strip() for s in self.msgraph_scopes.split(",") if s.strip()]

    def validate_for_run(self) -> None:
        """Fail early when the workflow cannot possibly run."""
        if not self.msgraph_client_id:
            raise ConfigurationError("MSGRAPH_CLIENT_ID is required")
        if not self.scopes:
            raise ConfigurationError("MSGRAPH_SCOPES must list at least one scope")
        if not self.onedrive_path_to_file:
            raise ConfigurationError("ONEDRIVE_PATH_TO_FILE is required")
        if not (
            (self.azure_openai_api_key and self.azure_openai_endpoint)
            or self.openai_api_key
            or self.anthropic_api_key
        ):
            raise ConfigurationError("No completion backend configured")
        if not 0 <= self.followup_weekday <= 6:
            raise ConfigurationError("FOLLOWUP_WEEKDAY must be 0 (Monday) .. 6 (Sunday)")
        if not 0 <= self.followup_hour <= 23:
            raise ConfigurationError("FOLLOWUP_HOUR must be 0 .. 23")


def get_settings() -> Settings:
    return Settings()


settings = Settings()
