import os
from pathlib import Path

import yaml

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DB_PATH = PROJECT_ROOT / "data" / "feedpush.db"
DB_URL = os.environ.get("FEEDPUSH_DB_URL", "").strip() or f"sqlite:///{DB_PATH}"
SETTINGS_PATH = Path(os.environ.get("FEEDPUSH_SETTINGS", "").strip() or PROJECT_ROOT / "feedpush.yaml")

DEFAULT_SETTINGS = {
    "popular_limit": 5,
    "popular_window_days": 1,
    "firebase_credentials": None,
}

# Ensure data directory exists for the default SQLite database
if DB_URL == f"sqlite:///{DB_PATH}":
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)


def load_settings(path: Path | None = None) -> dict:
    """Load settings from YAML, merged over DEFAULT_SETTINGS."""
    path = path or SETTINGS_PATH
    settings = dict(DEFAULT_SETTINGS)
    if not path.exists():
        return settings
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    settings.update({k: v for k, v in data.items() if k in DEFAULT_SETTINGS})
    return settings


def api_token() -> str | None:
    """Bearer token the API requires, or None when FEEDPUSH_TOKEN is unset or blank."""
    return os.environ.get("FEEDPUSH_TOKEN", "").strip() or None
