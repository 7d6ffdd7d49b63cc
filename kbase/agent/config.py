"""Service configuration with environment variable loading.

Pydantic-based settings for storage, seeding and the AI assistant.
The assistant runs in demo mode unless disabled and given an API key
for OpenAI or an OpenAI-compatible endpoint.
"""

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

_DEFAULT_DATA_DIR = Path(__file__).parent.parent.parent / "data"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Configuration for the knowledge base service.

    Attributes:
        data_dir: Directory for the JSON store. None disables persistence.
        seed_document_count: Documents generated when no stored corpus exists.
        seed_query_count: Query log entries generated on first start.
        demo_mode: Answer with canned responses instead of calling an LLM.
        demo_latency_ms: Artificial delay applied to demo answers.
        llm_api_key: API key for live mode.
        llm_base_url: API base URL (None for OpenAI default).
        llm_model: Model identifier to use in live mode.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
    """

    data_dir: Path | None = Field(
        default_factory=lambda: Path(os.getenv("KB_DATA_DIR", str(_DEFAULT_DATA_DIR))),
        description="Directory for persisted JSON data",
    )
    seed_document_count: int = Field(
        default_factory=lambda: int(os.getenv("KB_SEED_DOCUMENTS", "300")),
        ge=0,
        le=5000,
        description="Number of mock documents generated on first start",
    )
    seed_query_count: int = Field(
        default=100,
        ge=0,
        description="Number of mock query records generated on first start",
    )
    demo_mode: bool = Field(
        default_factory=lambda: _env_bool("KB_DEMO_MODE", True),
        description="Use canned AI responses",
    )
    demo_latency_ms: int = Field(
        default_factory=lambda: int(os.getenv("KB_DEMO_LATENCY_MS", "0")),
        ge=0,
        le=10000,
        description="Simulated latency for demo AI responses",
    )
    llm_api_key: str | None = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY")) or None,
        description="API key for LLM provider",
    )
    llm_base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for OpenAI default)",
    )
    llm_model: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Model to use in live mode",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=1024,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )

    @field_validator("llm_api_key")
    @classmethod
    def normalize_api_key(cls, v: str | None) -> str | None:
        """Strip the API key and treat blank values as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()


@lru_cache
def get_settings() -> Settings:
    """Create settings from environment.

    Returns:
        Cached Settings instance.
    """
    return Settings()
