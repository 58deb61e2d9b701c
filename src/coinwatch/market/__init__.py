"""Market data layer -- CoinGecko client and coin-list monitoring."""

from coinwatch.market.client import MarketDataClient
from coinwatch.market.coin_list import CoinListMonitor
from coinwatch.market.coingecko_client import CoinGeckoClient

__all__ = ["CoinGeckoClient", "CoinListMonitor", "MarketDataClient"]
