from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # core
    ENV: str = "dev"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    # Create tables on startup (there is no migration history for the single table)
    DB_CREATE_TABLES: bool = True

    # database & redis
    # Plain strings so sqlite:// and redis:// URLs are always accepted
    DATABASE_URL: str
    REDIS_URL: str | None = None

    # llm
    OPENROUTER_API_KEY: str | None = None
    OPENAI_API_KEY: str | None = None
    # Hard cap on concurrent LLM calls per process
    LLM_MAX_CONCURRENCY: int = 4
    CAA_DEFAULT_MODEL: str = "anthropic/claude-sonnet-4.5"
    CAA_MAX_ATTEMPTS: int = 3
    CAA_MAX_SELECTED_IMAGES: int = 8
    ENHANCE_BRIEF_MODEL: str = "anthropic/claude-sonnet-4.5"
    DESCRIBE_IMAGE_MODEL: str = "google/gemini-2.5-flash"
    DESCRIBE_IMAGE_CACHE_TTL_SECONDS: int = 60 * 60 * 24 * 7

    # image models
    REPLICATE_API_KEY: str | None = None
    REPLICATE_BASE_URL: str = "https://api.replicate.com/v1"
    REPLICATE_TIMEOUT_SECONDS: int = 120

    # object storage (S3-compatible, e.g. R2 behind a Cloudflare CDN)
    S3_BUCKET: str = "briefboarder"
    S3_ENDPOINT: str | None = None
    S3_REGION: str = "auto"
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None
    S3_PUBLIC_ENDPOINT: str | None = None

    # collaboration
    LIVEBLOCKS_SECRET_KEY: str | None = None
    LIVEBLOCKS_BASE_URL: str = "https://api.liveblocks.io/v2"

    # auth / security
    API_AUTH_KEY: str | None = None
    FRONTEND_ORIGIN: str | None = None
    # Explicit debug-only switch for wide-open CORS in non-prod envs
    CORS_ALLOW_ALL_ORIGINS: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
