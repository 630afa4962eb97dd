from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the absolute path to the project root
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_LOG_DIR = str(PROJECT_ROOT / "logs")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """
    Centralized runtime configuration for the email scraper.
    All defaults are sensible for dev-mode; ops override via ENV.
    """

    # --- Crawl defaults ---
    default_max_depth: int = Field(default=2, ge=0, le=10)
    default_max_pages: int = Field(default=50, ge=1, le=1000)
    default_delay_ms: int = Field(default=1000, ge=0, le=10000)
    default_timeout_ms: int = Field(default=30000, ge=5000, le=120000)

    # --- Browser ---
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = "en-US,en;q=0.9"
    settle_delay_ms: int = 500  # late DOM mutations after domcontentloaded

    # --- Robots ---
    robots_timeout_s: float = 5.0

    # --- Batch ---
    max_batch_size: int = 10
    max_concurrent_seeds: int = Field(default=1, ge=1)

    # --- Enrichment (OpenRouter) ---
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    enrichment_model: str = "google/gemini-flash-1.5"
    enrichment_timeout_s: float = 30.0
    enrichment_max_retries: int = 2
    enrichment_max_tokens: int = 500

    # --- Logging ---
    log_level: str = "INFO"
    log_dir: str = DEFAULT_LOG_DIR

    # --- API ---
    api_host: str = "0.0.0.0"
    api_port: int = 3001

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create a singleton instance
settings = Settings()
