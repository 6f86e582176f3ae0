"""Configuration management using pydantic-settings."""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every threshold here is a tunable default, not a physical constant.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAIN_VERDICT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Praise filter
    praise_min_similarity: float = Field(
        default=0.45,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity to the praise anchor to count as praise",
    )
    praise_margin: float = Field(
        default=0.10,
        ge=0.0,
        le=1.0,
        description="How much closer to praise than to complaint a text must be",
    )
    embedding_timeout_seconds: float = Field(
        default=20.0,
        gt=0.0,
        le=300.0,
        description="Timeout for a single embedding backend call",
    )

    # Data confidence (signal volume bounds)
    confidence_low_min_signals: int = Field(
        default=15,
        ge=1,
        description="Signals needed before data confidence leaves 'very_low'",
    )
    confidence_medium_min_signals: int = Field(
        default=50,
        ge=1,
        description="Signals needed for 'medium' data confidence",
    )
    confidence_high_min_signals: int = Field(
        default=100,
        ge=1,
        description="Signals needed for 'high' data confidence",
    )
    confidence_high_quality_ratio: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Share of high+medium intensity signals required for 'high' confidence",
    )

    # Theme resonance
    resonance_high_ratio: float = Field(
        default=1.5,
        gt=0.0,
        description="Theme/overall engagement ratio above which resonance is high",
    )
    resonance_low_ratio: float = Field(
        default=0.7,
        gt=0.0,
        description="Theme/overall engagement ratio below which resonance is low",
    )

    # Calibration
    wtp_boost_ratio: float = Field(
        default=0.05,
        ge=0.0,
        le=1.0,
        description="WTP share of signals above which the pain score is boosted",
    )

    # Dedupe
    dedupe_threshold: float = Field(
        default=0.92,
        ge=0.0,
        le=1.0,
        description="Token-set similarity at which two signal texts count as duplicates",
    )

    # Embedding backend (OpenAI via LangChain)
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENAI_API_KEY", "PAIN_VERDICT_OPENAI_API_KEY"),
        description="OpenAI API key (accepts OPENAI_API_KEY or PAIN_VERDICT_OPENAI_API_KEY)",
    )
    embedding_model: str = Field(
        default="text-embedding-3-large",
        description="OpenAI embedding model",
    )
    embedding_dimensions: int = Field(
        default=1536,
        ge=64,
        le=3072,
        description="Embedding vector length requested from the backend",
    )
    embedding_max_retries: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts made by the embedding client before giving up",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )
    log_json: bool = Field(
        default=False,
        description="Output logs as JSON (for production)",
    )


def get_settings() -> Settings:
    """Load and return application settings."""
    return Settings()
