"""Application configuration — loads .env, then overrides from settings.json."""

import json
import os
from pathlib import Path

from dotenv import load_dotenv

# Find the project root (where .env lives)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# Runtime settings file for in-app configuration
_SETTINGS_FILE = _PROJECT_ROOT / "data" / "settings.json"


def _load_settings() -> dict:
    """Load saved runtime settings from JSON file."""
    if _SETTINGS_FILE.exists():
        try:
            return json.loads(_SETTINGS_FILE.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            pass
    return {}


def _save_settings(settings: dict):
    """Persist runtime settings to JSON file."""
    _SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
    _SETTINGS_FILE.write_text(
        json.dumps(settings, indent=2), encoding="utf-8"
    )


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Load saved settings once at import time
_runtime = _load_settings()


class Config:
    """Central configuration: .env defaults, settings.json overrides."""

    # Paths
    PROJECT_ROOT: Path = _PROJECT_ROOT
    DATABASE_PATH: Path = Path(
        os.getenv("DATABASE_PATH", str(_PROJECT_ROOT / "data" / "workshop.db"))
    )
    BACKUP_PATH: Path = Path(
        os.getenv("DATABASE_BACKUP_PATH", str(_PROJECT_ROOT / "data" / "backups"))
    )
    REPORTS_DIRECTORY: str = _runtime.get(
        "reports_directory",
        os.getenv("REPORTS_DIRECTORY", str(_PROJECT_ROOT / "data" / "reports")),
    )

    # Shop
    SHOP_NAME: str = _runtime.get(
        "shop_name",
        os.getenv("SHOP_NAME", "Mech Shop"),
    )
    CURRENCY_SYMBOL: str = _runtime.get(
        "currency_symbol",
        os.getenv("CURRENCY_SYMBOL", "$"),
    )

    # Appointments
    UPCOMING_DAYS: int = int(_runtime.get(
        "upcoming_days",
        os.getenv("UPCOMING_DAYS", "7"),
    ))

    # First-run demo data (three users, four services, five inventory items)
    SEED_DEMO_DATA: bool = _runtime.get(
        "seed_demo_data",
        _env_bool("SEED_DEMO_DATA", "true"),
    )

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def update_shop_settings(cls, shop_name: str, currency_symbol: str):
        """Update shop display settings at runtime and persist to disk."""
        cls.SHOP_NAME = shop_name
        cls.CURRENCY_SYMBOL = currency_symbol

        settings = _load_settings()
        settings["shop_name"] = shop_name
        settings["currency_symbol"] = currency_symbol
        _save_settings(settings)

    @classmethod
    def update_upcoming_days(cls, days: int):
        """Update the default look-ahead window for upcoming appointments."""
        if days < 0:
            raise ValueError("Upcoming window must be zero or more days")
        cls.UPCOMING_DAYS = days

        settings = _load_settings()
        settings["upcoming_days"] = days
        _save_settings(settings)

    @classmethod
    def update_reports_directory(cls, directory: str):
        """Update where exported reports are written and persist."""
        cls.REPORTS_DIRECTORY = directory

        settings = _load_settings()
        settings["reports_directory"] = directory
        _save_settings(settings)
