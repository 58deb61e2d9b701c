"""Search, sort, filter and paginate the cached coin list.

Pure functions over lists of CoinSummary; the monitor owns the data and the
page routes compose these per request.
"""

import math
from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from coinwatch.models import CoinSummary

T = TypeVar("T")

SORT_KEYS: dict[str, Callable[[CoinSummary], Any]] = {
    "rank": lambda c: c.market_cap_rank,
    "name": lambda c: c.name.lower(),
    "price": lambda c: c.current_price,
    "change_24h": lambda c: c.price_change_percentage_24h,
    "market_cap": lambda c: c.market_cap,
}


@dataclass
class Page(Generic[T]):
    """One page of results plus navigation info."""

    items: list[T]
    page: int
    total_pages: int
    total_items: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def search(coins: Sequence[CoinSummary], term: str, limit: int = 10) -> list[CoinSummary]:
    """Case-insensitive substring match on coin name, capped at `limit`.

    A blank term returns no results (the dropdown stays closed).
    """
    needle = term.strip().lower()
    if not needle:
        return []
    return [coin for coin in coins if needle in coin.name.lower()][:limit]


def sort_coins(
    coins: Sequence[CoinSummary], key: str = "rank", descending: bool = False
) -> list[CoinSummary]:
    """Sort coins by one of SORT_KEYS; missing values always sort last.

    Raises:
        ValueError: Unknown sort key.
    """
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key {key!r}; expected one of {sorted(SORT_KEYS)}")

    getter = SORT_KEYS[key]
    present = [c for c in coins if getter(c) is not None]
    missing = [c for c in coins if getter(c) is None]
    return sorted(present, key=getter, reverse=descending) + missing


def filter_favorites(coins: Sequence[CoinSummary], favorites: Collection[str]) -> list[CoinSummary]:
    return [coin for coin in coins if coin.id in favorites]


def top_by_market_cap(coins: Sequence[CoinSummary], n: int = 10) -> list[CoinSummary]:
    """First n coins; the markets endpoint already orders by market cap."""
    return list(coins[:n])


def paginate(items: Sequence[T], page: int, per_page: int = 10) -> Page[T]:
    """Slice `items` into a page, clamping `page` into [1, total_pages]."""
    total_pages = max(1, math.ceil(len(items) / per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return Page(
        items=list(items[start:start + per_page]),
        page=page,
        total_pages=total_pages,
        total_items=len(items),
    )
