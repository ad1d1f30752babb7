from pydantic_settings import BaseSettings
from typing import Optional, Dict, List
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_SHEET_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vR1yXM-26NcSPpkrOMGFgvCRwYcFfzcaSSYGiD8mztHs_tJjUXLoFf7F-J2kwEWEw/pub?output=csv"
)

VALID_MATCH_MODES = {"contains", "exact"}


class Settings(BaseSettings):
    """Application settings.

    These settings can be overridden with environment variables.
    """
    # API Settings
    PROJECT_NAME: str = "Sheet Dictionary Lookup"

    # Data source
    SHEET_CSV_URL: str = DEFAULT_SHEET_CSV_URL
    FETCH_TIMEOUT_SECONDS: float = 20.0
    LOAD_ON_STARTUP: bool = True

    # Column vocabulary (normalized header keys)
    REQUIRED_KEY: str = "fromContent"
    SECONDARY_KEY: str = "toContent"
    EXAMPLE_KEY: str = "types"
    REQUIRED_HEADERS: List[str] = ["fromContent", "toContent"]
    DISPLAY_COLUMNS: List[Dict[str, str]] = [
        {"key": "fromContent", "label": "English"},
        {"key": "toContent", "label": "Malayalam"},
    ]

    # Search behavior
    SEARCH_FIELDS: List[str] = ["fromContent", "toContent"]
    MATCH_MODE: str = "contains"
    DEBOUNCE_MS: int = 300

    # Theme preference
    THEME_STATE_FILE: str = "var/theme_state.json"
    DEFAULT_THEME: str = "light"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: Optional[int] = None  # Will be set from environment variable
    RELOAD: bool = True
    WORKERS: int = 1

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS Settings
    CORS_ORIGINS: list[str] = ["*"]
    CORS_METHODS: list[str] = ["*"]
    CORS_HEADERS: list[str] = ["*"]

    class Config:
        case_sensitive = True


def get_settings() -> Settings:
    """Build a fresh settings instance (no cache so env changes are picked up)."""
    import os
    s = Settings()

    s.PORT = int(os.environ.get("BACKEND_PORT", 8000))

    env_load = os.environ.get("LOAD_ON_STARTUP")
    if env_load is not None:
        s.LOAD_ON_STARTUP = str(env_load).strip().lower() not in {"0", "false", "no"}

    mode = (s.MATCH_MODE or "").strip().lower()
    if mode not in VALID_MATCH_MODES:
        logger.warning(f"Unknown MATCH_MODE {s.MATCH_MODE!r}, falling back to 'contains'")
        mode = "contains"
    s.MATCH_MODE = mode

    try:
        s.DEBOUNCE_MS = max(0, int(s.DEBOUNCE_MS))
    except Exception:
        s.DEBOUNCE_MS = 300

    try:
        s.FETCH_TIMEOUT_SECONDS = max(0.1, float(s.FETCH_TIMEOUT_SECONDS))
    except Exception:
        s.FETCH_TIMEOUT_SECONDS = 20.0

    # The required key is always a required header and a search field candidate
    if s.REQUIRED_KEY and s.REQUIRED_KEY not in s.REQUIRED_HEADERS:
        s.REQUIRED_HEADERS = [s.REQUIRED_KEY] + list(s.REQUIRED_HEADERS)

    if s.DEFAULT_THEME not in {"light", "dark"}:
        s.DEFAULT_THEME = "light"

    return s


# Create a global settings instance
settings = get_settings()
