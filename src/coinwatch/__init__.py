"""Coinwatch -- cryptocurrency price dashboard backed by the CoinGecko API."""

__version__ = "0.1.0"
