"""Configuration for the PR Reviewer."""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # App
    environment: str = Field(default="development", env="ENVIRONMENT")
    debug: bool = Field(default=True, env="DEBUG")
    log_level: Optional[str] = Field(default=None, env="LOG_LEVEL")

    # LLM - OpenRouter (multi-provider gateway)
    openrouter_api_key: Optional[str] = Field(default=None, env="OPENROUTER_API_KEY")

    # GitHub App Authentication
    github_app_id: Optional[str] = Field(default=None, env="GITHUB_APP_ID")
    github_private_key: Optional[str] = Field(default=None, env="GITHUB_PRIVATE_KEY")
    github_installation_id: Optional[str] = Field(default=None, env="GITHUB_INSTALLATION_ID")

    # Review Configuration
    review_model: str = Field(default="deepseek-chat", env="REVIEW_MODEL")
    max_files_per_review: int = Field(default=50, env="MAX_FILES_PER_REVIEW")
    llm_timeout_seconds: float = Field(default=120.0, env="LLM_TIMEOUT_SECONDS")
    llm_max_retries: int = Field(default=2, env="LLM_MAX_RETRIES")

    # Token budget for the assembled diff
    max_tokens: int = Field(default=30000, env="MAX_TOKENS")
    soft_threshold_tokens: int = Field(default=3000, env="SOFT_THRESHOLD_TOKENS")
    hard_threshold_tokens: int = Field(default=2000, env="HARD_THRESHOLD_TOKENS")
    clip_min_tokens: int = Field(default=100, env="CLIP_MIN_TOKENS")
    emergency_token_budget: int = Field(default=1000, env="EMERGENCY_TOKEN_BUDGET")
    token_estimator: str = Field(default="chars", env="TOKEN_ESTIMATOR")
    tiktoken_encoding: str = Field(default="cl100k_base", env="TIKTOKEN_ENCODING")

    # Patch context extension
    max_extra_context_lines: int = Field(default=10, env="MAX_EXTRA_CONTEXT_LINES")
    patch_extra_lines_before: int = Field(default=3, env="PATCH_EXTRA_LINES_BEFORE")
    patch_extra_lines_after: int = Field(default=3, env="PATCH_EXTRA_LINES_AFTER")

    # GitHub fetch pacing
    fetch_batch_size: int = Field(default=5, env="FETCH_BATCH_SIZE")
    fetch_batch_delay_seconds: float = Field(default=0.1, env="FETCH_BATCH_DELAY_SECONDS")
    comment_post_delay_seconds: float = Field(default=0.5, env="COMMENT_POST_DELAY_SECONDS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


settings = Settings()
