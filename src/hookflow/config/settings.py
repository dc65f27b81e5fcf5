"""Configuration and settings management using pydantic-settings."""
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable loading."""

    model_config = SettingsConfigDict(
        env_prefix="HOOKFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core service settings
    env: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format: json or text")

    # Definition store
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for workflow definitions",
    )
    workflow_key_prefix: str = Field(
        default="workflow:",
        description="Key prefix under which workflow definitions are stored",
    )

    # Node runtime
    http_timeout_s: float = Field(
        default=30,
        description="Timeout applied to every outbound HTTP call",
    )
    wait_default_s: float = Field(
        default=5,
        description="Wait node duration when no amount is configured",
    )

    # Chat completion (OpenAI)
    openai_api_key: SecretStr | None = Field(default=None, description="OpenAI API key")
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI API base URL",
    )
    openai_model: str = Field(default="gpt-4o-mini", description="Chat model")
    openai_max_tokens: int = Field(default=1200, description="max_tokens per completion")
    openai_system_prompt: str = Field(
        default="You are a helpful assistant.",
        description="System message sent with every completion",
    )

    # Uploads (Cloudinary)
    cloudinary_cloud_name: str | None = Field(default=None)
    cloudinary_api_key: SecretStr | None = Field(default=None)
    cloudinary_api_secret: SecretStr | None = Field(default=None)
    cloudinary_upload_preset: str = Field(default="unsigned")
    cloudinary_base_url: str = Field(default="https://api.cloudinary.com/v1_1")

    # Transcription (AssemblyAI)
    assemblyai_api_key: SecretStr | None = Field(default=None)
    assemblyai_base_url: str = Field(default="https://api.assemblyai.com/v2")

    @field_validator("http_timeout_s", "wait_default_s")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Durations must be positive."""
        if v <= 0:
            raise ValueError("duration must be positive")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
