"""Application settings using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for cvmatch."""

    model_config = SettingsConfigDict(env_prefix="CVM_", env_file=".env")

    # --- LLM ---
    anthropic_api_key: SecretStr = Field(
        description="Anthropic API key for Claude models",
    )
    haiku_model: str = Field(
        default="claude-haiku-4-5-20251001",
        description="Model ID for fast/cheap LLM calls (parsing, extraction)",
    )
    sonnet_model: str = Field(
        default="claude-sonnet-4-5-20250514",
        description="Model ID for high-quality LLM calls (CV rewriting)",
    )

    # --- Database ---
    database_url: str = Field(
        default="sqlite+aiosqlite:///./cvmatch.db",
        description="SQLAlchemy async database URL",
    )

    # --- Embeddings ---
    embedding_provider: Literal["voyage", "local"] = Field(
        default="local",
        description="Embedding provider: 'local' (free) or 'voyage' (API)",
    )
    voyage_api_key: SecretStr | None = Field(
        default=None,
        description="Voyage API key (required if embedding_provider=voyage)",
    )
    embedding_model: str = Field(
        default="paraphrase-multilingual-MiniLM-L12-v2",
        description="Local embedding model name (multilingual for French CVs)",
    )
    embedding_dimension: int = Field(
        default=384,
        description="Embedding vector dimension (384 for MiniLM, 1024 for Voyage)",
    )
    embedding_max_chars: int = Field(
        default=8000,
        description="Texts are truncated to this many characters before embedding",
    )

    # --- Cache ---
    cache_dir: Path = Field(
        default=Path("./.cache/cvmatch"),
        description="Directory for diskcache persistent cache",
    )
    cache_ttl_hours: int = Field(
        default=24 * 30,
        description="Embedding cache TTL in hours",
    )

    # --- Email ---
    email_provider: Literal["sendgrid", "smtp"] = Field(
        default="smtp",
        description="Email delivery provider",
    )
    sendgrid_api_key: SecretStr | None = Field(
        default=None,
        description="SendGrid API key (required if email_provider=sendgrid)",
    )
    smtp_host: str = Field(
        default="smtp.gmail.com",
        description="SMTP server hostname",
    )
    smtp_port: int = Field(
        default=587,
        description="SMTP server port",
    )
    smtp_user: str = Field(
        default="",
        description="SMTP username",
    )
    smtp_password: SecretStr | None = Field(
        default=None,
        description="SMTP password",
    )
    email_from: str = Field(
        default="noreply@cvmatch.fr",
        description="Sender address for outgoing emails",
    )
    app_base_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL used to build invitation links",
    )

    # --- Logging ---
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer: human-readable console or JSON lines",
    )

    # --- Matching ---
    max_optimization_attempts: int = Field(
        default=5,
        ge=1,
        description="Maximum CV rewrite attempts per optimization run",
    )
    optimization_target_score: float = Field(
        default=0.95,
        ge=0.0,
        le=1.0,
        description="Stop rewriting once the best score reaches this value",
    )
    low_score_threshold: int = Field(
        default=60,
        description="Dossiers scoring below this are flagged on the dashboard",
    )

    # --- Workspace ---
    invitation_ttl_days: int = Field(
        default=7,
        description="Days before a candidate invitation expires",
    )
    invitation_expiry_warning_days: int = Field(
        default=2,
        description="Pending invitations expiring within this window are flagged",
    )
    stale_dossier_days: int = Field(
        default=7,
        description="In-progress dossiers untouched for this long are flagged",
    )
    default_page_size: int = Field(
        default=20,
        description="Default page size for list operations",
    )

    # --- Run ---
    agent_timeout_seconds: int = Field(
        default=300,
        description="Timeout for a single agent step",
    )

    # --- Cost Guardrails ---
    max_cost_per_run_usd: float = Field(
        default=2.0,
        description="Hard stop if estimated cost exceeds this (USD)",
    )
    warn_cost_threshold_usd: float = Field(
        default=1.0,
        description="Log warning at this cost threshold (USD)",
    )

    @model_validator(mode="after")
    def validate_embedding_config(self) -> Settings:
        """Validate embedding provider configuration."""
        if self.embedding_provider == "voyage" and not self.voyage_api_key:
            msg = "voyage_api_key required when embedding_provider=voyage"
            raise ValueError(msg)
        if self.embedding_provider == "voyage":
            self.embedding_dimension = 1024
        return self

    @model_validator(mode="after")
    def validate_email_config(self) -> Settings:
        """Validate email provider configuration."""
        if self.email_provider == "sendgrid" and not self.sendgrid_api_key:
            msg = "sendgrid_api_key required when email_provider=sendgrid"
            raise ValueError(msg)
        return self
