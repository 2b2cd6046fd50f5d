"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    whatsapp_access_token: str
    whatsapp_phone_number_id: str
    whatsapp_verify_token: str
    whatsapp_app_secret: str | None = None
    whatsapp_api_version: str = "v21.0"
    whatsapp_graph_url: str = "https://graph.facebook.com"
    openai_api_key: str
    openai_model: str = "gpt-4o-mini"
    classifier_timeout_seconds: float = 15.0
    backend_base_url: str = "http://localhost:8080"
    backend_reports_endpoint: str = "/api/reports"
    gateway_timeout_seconds: float = 30.0
    max_messages_per_day: int = 200
    max_messages_per_hour: int = 50
    max_messages_per_number: int = 10
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    admin_token: str
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def reports_url(self) -> str:
        """Full URL of the report creation endpoint."""
        return f"{self.backend_base_url.rstrip('/')}{self.backend_reports_endpoint}"

    @property
    def activity_sink_enabled(self) -> bool:
        """Return true when Supabase credentials for the activity log are set."""
        return bool(self.supabase_url and self.supabase_service_key)
