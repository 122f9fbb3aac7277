"""Process-level settings loaded from the environment.

Every field can be overridden with an ``RABBITHOLE_``-prefixed environment
variable (e.g. ``RABBITHOLE_EMBEDDING_MODEL``) or a ``.env`` file. Engines do
not read settings directly; they take explicit config objects, and the
``from_settings`` constructors bridge the two.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the scoring pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="RABBITHOLE_",
        env_file=".env",
        extra="ignore",
    )

    # Embedding provider (OpenAI-compatible /embeddings endpoint)
    embedding_api_base: str = "https://api.openai.com/v1"
    embedding_api_key: Optional[str] = None
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = Field(default=512, gt=0)
    embedding_timeout_s: float = Field(default=10.0, gt=0)

    # Enforcement thresholds
    speculation_threshold: float = 30.0
    ethics_risk_threshold: float = 0.7
    evidence_requirement: float = 7.0
    citation_minimum: int = 2
    jargon_limit_percentage: float = 20.0
    min_overall_score: float = 7.0
    auto_kill_enabled: bool = True

    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached process settings."""
    return Settings()
