"""
Configuration module using Pydantic Settings.

Loads the Azure AI Foundry endpoint, credentials and app options from
environment variables. Supports .env files for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Azure AI Foundry (OpenAI-compatible chat completions)
    azure_ai_foundry_endpoint: str = ""
    azure_ai_foundry_api_key: str = ""
    azure_ai_foundry_api_version: str = ""
    azure_ai_foundry_model: str = "gpt-4.1-mini"
    azure_ai_foundry_use_entra_id: bool = False
    azure_ai_foundry_timeout: float = 30.0
    azure_ai_foundry_max_retries: int = 2

    # Audit trail persistence (empty = in-memory only)
    audit_log_path: str = ""

    # Application Insights
    applicationinsights_connection_string: str = ""

    # App
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]


def get_settings() -> Settings:
    """Factory for settings instance."""
    return Settings()
