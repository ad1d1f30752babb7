import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

THEME_STORAGE_KEY = "dictionaryTheme"
VALID_THEMES = ("light", "dark")
DEFAULT_THEME = "light"


def _compute_state_file() -> Path:
    """Resolve the theme state file.

    Priority:
    1) THEME_STATE_FILE env var (explicit override)
    2) settings.THEME_STATE_FILE
    """
    override = os.environ.get("THEME_STATE_FILE")
    if override:
        return Path(override)
    try:
        from config import settings as _settings
        return Path(_settings.THEME_STATE_FILE)
    except Exception:
        return Path("var/theme_state.json")


STATE_FILE = _compute_state_file()


def _coerce_theme(value: Any, default: str = DEFAULT_THEME) -> str:
    return value if value in VALID_THEMES else default


def load_state() -> Dict[str, Any]:
    try:
        if STATE_FILE.exists():
            with open(STATE_FILE, "r", encoding="utf-8") as f:
                state = json.load(f)
                if isinstance(state, dict):
                    return state
    except Exception as e:
        logger.debug(f"Could not read theme state from {STATE_FILE}: {e}")
    return {}


def save_state(state: Dict[str, Any]) -> bool:
    try:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        tmp = STATE_FILE.with_suffix(".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(state, f)
        tmp.replace(STATE_FILE)
        return True
    except Exception as e:
        logger.warning(f"Could not persist theme state to {STATE_FILE}: {e}")
        return False


def get_theme(default: Optional[str] = None) -> str:
    """Return the stored theme; absent or unknown values read as the default."""
    fallback = _coerce_theme(default)
    return _coerce_theme(load_state().get(THEME_STORAGE_KEY), fallback)


def set_theme(theme: str) -> str:
    if theme not in VALID_THEMES:
        raise ValueError(f"theme must be one of {VALID_THEMES}, got {theme!r}")
    state = load_state()
    state[THEME_STORAGE_KEY] = theme
    save_state(state)
    return theme


def toggle_theme(default: Optional[str] = None) -> str:
    current = get_theme(default)
    return set_theme("light" if current == "dark" else "dark")
