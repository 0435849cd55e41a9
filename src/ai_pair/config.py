"""Settings for the ai-pair terminal tool.

Configuration is loaded from:
- environment variables prefixed with ``AI_PAIR_``
- and a local `.env` file (if present)

API keys are not part of these settings; they live in the per-user
credential file handled by :mod:`ai_pair.credentials`.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ai_pair.core.orchestrator import DEFAULT_PRIMARY_SYSTEM_PROMPT
from ai_pair.llm.models import ProviderConfig

DEFAULT_CONFIG_PATH = Path.home() / ".ai_vs_ai_config"
DEFAULT_OUTPUT_DIR = Path.home() / "ai_pair_conversations"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppSettings(BaseSettings):
    """Settings for a session.

    Environment variables (all prefixed with ``AI_PAIR_``):
    - PRIMARY_BASE_URL, PRIMARY_MODEL, PRIMARY_NAME
    - REVIEWER_BASE_URL, REVIEWER_MODEL, REVIEWER_NAME
    - TEMPERATURE, PRIMARY_SYSTEM_PROMPT, REVIEW_LANGUAGE
    - OUTPUT_DIR, CONFIG_PATH, LOG_LEVEL

    Notes:
        Tests can point at a specific env file via
        `AppSettings(_env_file=path_to_env)`.
    """

    primary_base_url: str = Field(
        default="https://api.moonshot.cn/v1",
        description="Base URL of the primary provider",
    )
    primary_model: str = Field(
        default="moonshot-v1-8k",
        description="Model that answers the question",
    )
    primary_name: str = Field(
        default="Moonshot AI",
        description="Display name of the primary provider",
    )

    reviewer_base_url: str = Field(
        default="https://api.deepseek.com",
        description="Base URL of the reviewer provider",
    )
    reviewer_model: str = Field(
        default="deepseek-chat",
        description="Model that reviews the primary answer",
    )
    reviewer_name: str = Field(
        default="DeepSeek AI",
        description="Display name of the reviewer provider",
    )

    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for both providers",
    )
    primary_system_prompt: str = Field(
        default=DEFAULT_PRIMARY_SYSTEM_PROMPT,
        description="System persona for the primary model (empty disables it)",
    )
    review_language: str | None = Field(
        default=None,
        description="Language the reviewer should write in, e.g. 'Chinese'",
    )

    output_dir: Path = Field(
        default=DEFAULT_OUTPUT_DIR,
        description="Directory where saved conversations are written",
    )
    config_path: Path = Field(
        default=DEFAULT_CONFIG_PATH,
        description="Per-user credential file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="AI_PAIR_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("output_dir", "config_path", mode="after")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level", mode="after")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def primary_provider(self) -> ProviderConfig:
        """Provider used for the answering call."""

        return ProviderConfig(
            name=self.primary_name,
            base_url=self.primary_base_url,
            model=self.primary_model,
            temperature=self.temperature,
        )

    @property
    def reviewer_provider(self) -> ProviderConfig:
        """Provider used for the review call."""

        return ProviderConfig(
            name=self.reviewer_name,
            base_url=self.reviewer_base_url,
            model=self.reviewer_model,
            temperature=self.temperature,
        )
