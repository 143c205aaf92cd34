"""Configuration management for the training coach service."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # Sandboxed environments set variables directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # OpenAI configuration (required, embeddings only)
    OPENAI_API_KEY: str = Field(..., description="OpenAI API key")

    # Environment
    COACH_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Anthropic configuration (coach is disabled when the key is empty)
    ANTHROPIC_API_KEY: str = Field(default="", description="Anthropic API key")
    ANTHROPIC_BASE_URL: str = Field(
        default="https://api.anthropic.com", description="Anthropic API base URL"
    )
    ANTHROPIC_VERSION: str = Field(default="2023-06-01", description="anthropic-version header")

    # Coach conversation
    COACH_MODEL: str = Field(
        default="claude-3-opus-20240229", description="Model for coach conversations"
    )
    COACH_MAX_TOKENS: int = Field(default=4000, description="Max tokens per coach reply")
    COACH_STREAM_TIMEOUT: float = Field(
        default=120.0, description="Connect/read timeout for the upstream stream (seconds)"
    )

    # Training profile extraction
    PROFILE_MODEL: str = Field(
        default="claude-3-haiku-20240307", description="Model for profile extraction"
    )
    PROFILE_MAX_TOKENS: int = Field(default=1000, description="Max tokens for profile extraction")
    PROFILE_MIN_MESSAGES: int = Field(
        default=3, description="Profile is derived when the conversation has more messages"
    )

    # Embedding configuration
    EMBEDDING_MODEL: str = Field(
        default="text-embedding-ada-002", description="OpenAI embedding model"
    )
    EMBEDDING_DIM: int = Field(default=1536, description="Embedding vector dimension")

    # Retrieval configuration
    RETRIEVAL_MATCH_THRESHOLD: float = Field(
        default=0.65, description="Minimum similarity for a retrieved document"
    )
    RETRIEVAL_MATCH_COUNT: int = Field(default=3, description="Max documents per query")

    # Document upload and ingestion
    MAX_UPLOAD_BYTES: int = Field(
        default=10 * 1024 * 1024, description="Max file upload size in bytes"
    )
    DOCUMENT_CHUNK_CHARS: int = Field(
        default=1000, description="Max characters per training document chunk"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
