"""
Configuration for the collections engine.
Resolves data paths, marketplace API access and display defaults from
settings.json, a .env file and the environment.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger("storecoll.config")


__all__ = ["Config", "config"]


@dataclass
class Config:
    """
    Central configuration handling for the engine.
    Manages paths, the marketplace API, paging and display settings.
    """

    APP_DIR: Path = Path(__file__).parent.parent
    DATA_DIR: Path = Path(os.getenv("STORECOLL_DATA_DIR") or APP_DIR / "data")
    LOG_DIR: Path = DATA_DIR / "logs"

    SETTINGS_FILE: Path = DATA_DIR / "settings.json"
    DATABASE_FILE: Path = DATA_DIR / "collections.db"

    # Default values
    UI_LANGUAGE: str = "en"
    LOG_LEVEL: str = "INFO"
    PAGE_SIZE: int = 20

    # Marketplace API
    API_BASE_URL: str = "http://localhost:5000/api"
    API_TOKEN: str | None = None  # Runtime-only, NOT persisted to JSON
    REQUEST_TIMEOUT: float = 10.0

    SELLER_ID: str | None = None

    def __post_init__(self):
        """Initialize directories and load settings after instantiation."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)

        self._load_settings()

        load_dotenv()
        env_url = os.getenv("STORECOLL_API_URL")
        if env_url:
            self.API_BASE_URL = env_url
        env_token = os.getenv("STORECOLL_API_TOKEN")
        if env_token:
            self.API_TOKEN = env_token
        env_seller = os.getenv("STORECOLL_SELLER_ID")
        if env_seller:
            self.SELLER_ID = env_seller
        env_level = os.getenv("STORECOLL_LOG_LEVEL")
        if env_level:
            self.LOG_LEVEL = env_level.upper()

    def _load_settings(self) -> None:
        """Load settings from JSON file."""
        # Local import to avoid circular dependency
        from storecollections.utils.i18n import t

        if not self.SETTINGS_FILE.exists():
            return

        try:
            with open(self.SETTINGS_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)

                self.UI_LANGUAGE = data.get("ui_language", self.UI_LANGUAGE)
                self.LOG_LEVEL = data.get("log_level", self.LOG_LEVEL)
                self.PAGE_SIZE = int(data.get("page_size", self.PAGE_SIZE))
                self.API_BASE_URL = data.get("api_base_url", self.API_BASE_URL)
                self.REQUEST_TIMEOUT = float(data.get("request_timeout", self.REQUEST_TIMEOUT))
                self.SELLER_ID = data.get("seller_id", self.SELLER_ID)

        except (OSError, ValueError) as e:
            logger.error(t("logs.config.load_error", error=e))

    def save(self) -> None:
        """Save current configuration to JSON file."""
        # Local import to avoid circular dependency
        from storecollections.utils.i18n import t

        data = {
            "ui_language": self.UI_LANGUAGE,
            "log_level": self.LOG_LEVEL,
            "page_size": self.PAGE_SIZE,
            "api_base_url": self.API_BASE_URL,
            "request_timeout": self.REQUEST_TIMEOUT,
            "seller_id": self.SELLER_ID,
        }

        try:
            with open(self.SETTINGS_FILE, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(t("logs.config.save_error", error=e))

    @property
    def log_level(self) -> int:
        """LOG_LEVEL as a logging module constant, INFO when unknown."""
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO


config = Config()
