from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "ManaMarket"
    debug: bool = False

    inventory_path: Path = Path("data/cards.csv")

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "ManaMarket/1.0"

    # Per-request bound; a timed-out lookup drops the row, it never aborts a sync
    lookup_timeout_seconds: float = 10.0

    # Scryfall asks for at most 10 requests per second
    lookup_interval_seconds: float = 0.1

    load_catalog_on_startup: bool = False


settings = Settings()


# =============================================================================
# PRICING
# =============================================================================

# Fixed USD -> CLP conversion applied to every inventory purchase price.
# No live FX lookup; rounding for display happens at the presentation layer.
USD_TO_CLP = 750

DISPLAY_CURRENCY = "CLP"
