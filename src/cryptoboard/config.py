"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Lookback windows the history endpoint is queried with (days)
LOOKBACK_CHOICES: tuple[int, ...] = (1, 7, 30, 90)


class VenueSettings(BaseSettings):
    """Primary venue (pinned-pair ticker) connection settings."""

    model_config = SettingsConfigDict(env_prefix="VENUE_")

    exchange_id: str = "binance"  # any ccxt exchange id with a public ticker
    timeout_seconds: float = 10.0


class AggregatorSettings(BaseSettings):
    """CoinGecko market-data aggregator settings."""

    model_config = SettingsConfigDict(env_prefix="COINGECKO_")

    base_url: str = "https://api.coingecko.com/api/v3"
    vs_currency: str = "usd"
    api_key: SecretStr = SecretStr("")  # optional demo key for higher rate limits
    timeout_seconds: float = 10.0
    market_order: str = "market_cap_desc"


class BoardSettings(BaseSettings):
    """Pinned asset identity, listing size, and session behaviour.

    All fields configurable via BOARD_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="BOARD_")

    # Pinned asset
    pinned_asset_id: str = "vanar-chain"  # CoinGecko id
    pinned_symbol: str = "vanry"
    pinned_display_name: str = "Vanar Chain"  # used when the listing misses it
    pinned_pair: str = "VANRY/USDT"  # ccxt unified symbol on the primary venue
    quote_currency: str = "USDT"
    fallback_note: str = "*Shown in USDT using USD≈USDT"

    # Market listing
    listing_page: int = 1
    listing_page_size: int = Field(default=100, gt=0, le=250)

    # Session
    search_debounce_ms: int = Field(default=400, gt=0, lt=1000)
    default_lookback_days: int = 7
    notice_ttl_seconds: float = 4.0

    @field_validator("default_lookback_days")
    @classmethod
    def _check_lookback(cls, value: int) -> int:
        if value not in LOOKBACK_CHOICES:
            raise ValueError(f"default_lookback_days must be one of {LOOKBACK_CHOICES}")
        return value


class DashboardSettings(BaseSettings):
    """Dashboard server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080
    enabled: bool = True


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    venue: VenueSettings = VenueSettings()
    aggregator: AggregatorSettings = AggregatorSettings()
    board: BoardSettings = BoardSettings()
    dashboard: DashboardSettings = DashboardSettings()
