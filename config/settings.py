from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _load_env() -> None:
    # Centralized dotenv loading; safe if .env missing
    load_dotenv()


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _clean_credential(value: str | None) -> str | None:
    # .env values are often pasted with surrounding quotes
    if value is None:
        return None
    cleaned = value.replace('"', "").replace("'", "").strip()
    return cleaned or None


@dataclass(frozen=True)
class Settings:
    # Proxy (search backend)
    bright_username: str | None
    bright_password: str | None
    proxy_host: str
    proxy_port: int

    # Dataset snapshot API
    brightdata_api_token: str | None
    brightdata_api_url: str
    brightdata_dataset_id: str

    # Classification
    openai_api_key: str | None
    openai_model: str | None

    # Search
    search_url: str
    target_domain: str
    excluded_domain: str
    user_agent: str

    # Retry/backoff for the search fetcher
    max_retries: int
    retry_initial_delay_seconds: float
    retry_max_delay_seconds: float
    retry_backoff_factor: float
    request_timeout_seconds: int

    # Snapshot polling
    snapshot_poll_interval_seconds: float
    snapshot_max_attempts: int
    snapshot_max_handles: int
    snapshot_max_posts: int

    # Batching
    batch_size: int
    records_per_run: int
    profile_lookup_delay_seconds: float

    # Files
    input_csv: str
    output_dir: str
    progress_file: str

    log_level: str

    # Policy: treat unknown DM status as open when the snapshot lookup fails
    assume_dm_open_on_error: bool = True

    # Logging/tracing
    llm_trace: bool = False
    llm_log_path: str = "logs/llm_calls.jsonl"

    @property
    def proxy_url(self) -> str:
        return f"http://{self.bright_username}:{self.bright_password}@{self.proxy_host}:{self.proxy_port}"

    @property
    def batch_delay_seconds(self) -> float:
        return self.retry_initial_delay_seconds * 2

    def missing_credentials(self) -> list[str]:
        required = {
            "BRIGHT_USERNAME": self.bright_username,
            "BRIGHT_PASSWORD": self.bright_password,
            "BRIGHTDATA_API_TOKEN": self.brightdata_api_token,
            "OPENAI_API_KEY": self.openai_api_key,
        }
        return [name for name, value in required.items() if not value]

    def require_credentials(self) -> None:
        missing = self.missing_credentials()
        if missing:
            raise RuntimeError(
                f"Missing required credentials: {', '.join(missing)} (set them in the environment or .env)"
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_env()
    return Settings(
        bright_username=_clean_credential(os.getenv("BRIGHT_USERNAME")),
        bright_password=_clean_credential(os.getenv("BRIGHT_PASSWORD")),
        proxy_host=os.getenv("BRIGHT_PROXY_HOST", "brd.superproxy.io"),
        proxy_port=int(os.getenv("BRIGHT_PROXY_PORT", "33335")),
        brightdata_api_token=_clean_credential(os.getenv("BRIGHTDATA_API_TOKEN")),
        brightdata_api_url=os.getenv("BRIGHTDATA_API_URL", "https://api.brightdata.com/datasets/v3"),
        brightdata_dataset_id=os.getenv("BRIGHTDATA_DATASET_ID", "gd_lwxmeb2u1cniijd7t4"),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        search_url=os.getenv("SEARCH_URL", "https://www.google.com/search"),
        target_domain=os.getenv("TARGET_DOMAIN", "x.com"),
        excluded_domain=os.getenv("EXCLUDED_DOMAIN", "status.x.com"),
        user_agent=os.getenv(
            "USER_AGENT",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
        ),
        max_retries=int(os.getenv("MAX_RETRIES", "5")),
        retry_initial_delay_seconds=float(os.getenv("RETRY_INITIAL_DELAY", "2")),
        retry_max_delay_seconds=float(os.getenv("RETRY_MAX_DELAY", "30")),
        retry_backoff_factor=float(os.getenv("RETRY_BACKOFF_FACTOR", "1.5")),
        request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT", "30")),
        snapshot_poll_interval_seconds=float(os.getenv("SNAPSHOT_POLL_INTERVAL", "5")),
        snapshot_max_attempts=int(os.getenv("SNAPSHOT_MAX_ATTEMPTS", "10")),
        snapshot_max_handles=int(os.getenv("SNAPSHOT_MAX_HANDLES", "20")),
        snapshot_max_posts=int(os.getenv("SNAPSHOT_MAX_POSTS", "10")),
        batch_size=int(os.getenv("BATCH_SIZE", "5")),
        records_per_run=int(os.getenv("RECORDS_PER_RUN", "100")),
        profile_lookup_delay_seconds=float(os.getenv("PROFILE_LOOKUP_DELAY", "2")),
        input_csv=os.getenv("INPUT_CSV", "csv_input/founders.csv"),
        output_dir=os.getenv("OUTPUT_DIR", "output"),
        progress_file=os.getenv("PROGRESS_FILE", "progress.json"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        assume_dm_open_on_error=_as_bool(os.getenv("ASSUME_DM_OPEN_ON_ERROR"), default=True),
        llm_trace=_as_bool(os.getenv("LLM_TRACE")),
        llm_log_path=os.getenv("LLM_LOG_PATH", "logs/llm_calls.jsonl"),
    )
