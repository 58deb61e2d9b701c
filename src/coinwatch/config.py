"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoinGeckoSettings(BaseSettings):
    """CoinGecko market-data API connection settings."""

    model_config = SettingsConfigDict(env_prefix="COINGECKO_")

    base_url: str = "https://api.coingecko.com/api/v3"
    api_key: SecretStr = SecretStr("")  # optional demo key for higher rate limits
    vs_currency: str = "usd"
    per_page: int = 100
    request_timeout: float = 10.0  # seconds, total per request


class MonitorSettings(BaseSettings):
    """Coin-list polling parameters."""

    model_config = SettingsConfigDict(env_prefix="MONITOR_")

    poll_interval: float = 5.0  # seconds between coin-list refreshes


class DashboardSettings(BaseSettings):
    """Dashboard server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080
    update_interval: int = 5  # seconds between WebSocket pushes
    coins_per_page: int = 10
    search_limit: int = 10
    top_count: int = 10


class ChartSettings(BaseSettings):
    """Price-history chart configuration.

    display_timezone is an IANA zone name (e.g. "Europe/Berlin"). When unset,
    chart labels use the server's local time.
    """

    model_config = SettingsConfigDict(env_prefix="CHART_")

    default_range: str = "7D"
    display_timezone: str | None = None


class StorageSettings(BaseSettings):
    """Preference store location."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    db_path: str = "data/preferences.db"


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"
    coingecko: CoinGeckoSettings = CoinGeckoSettings()
    monitor: MonitorSettings = MonitorSettings()
    dashboard: DashboardSettings = DashboardSettings()
    chart: ChartSettings = ChartSettings()
    storage: StorageSettings = StorageSettings()
