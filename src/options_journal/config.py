"""Configuration via environment variables using pydantic-settings."""

from __future__ import annotations

from datetime import date
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class JournalConfig(BaseSettings):
    """All journal settings, loaded from env vars with OPTIONS_JOURNAL_ prefix."""

    model_config = {"env_prefix": "OPTIONS_JOURNAL_", "extra": "ignore", "env_file": ".env"}

    # --- Paths ---
    db_path: Path = Field(default=Path("data/journal.db"))
    kv_dir: Path = Field(default=Path("data/kv"))

    # --- Identity ---
    owner_id: str = "local"

    # --- Display ---
    preferred_accounts: str = "SAE,ST,ST Operating,Robinhood"
    start_trading_date: date | None = None

    # --- Social ---
    share_feed_limit: int = 50

    # --- Quotes ---
    quote_period: str = "5d"
    offline_mode: bool = False

    # --- Logging ---
    log_level: str = "WARNING"

    @property
    def preferred_account_list(self) -> list[str]:
        return [a.strip() for a in self.preferred_accounts.split(",") if a.strip()]
