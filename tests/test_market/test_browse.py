"""Tests for search, sort, favorites filter and pagination."""

from decimal import Decimal

import pytest

from coinwatch.market.browse import (
    filter_favorites,
    paginate,
    search,
    sort_coins,
    top_by_market_cap,
)
from coinwatch.models import CoinSummary


def _coin(coin_id: str, name: str, rank: int | None, price: str | None, change: str | None = None) -> CoinSummary:
    return CoinSummary(
        id=coin_id,
        name=name,
        symbol=coin_id[:3],
        market_cap_rank=rank,
        current_price=Decimal(price) if price is not None else None,
        price_change_percentage_24h=Decimal(change) if change is not None else None,
    )


COINS = [
    _coin("bitcoin", "Bitcoin", 1, "43000", "2.5"),
    _coin("ethereum", "Ethereum", 2, "2300", "-1.2"),
    _coin("bitcoin-cash", "Bitcoin Cash", 15, "250", None),
    _coin("newcoin", "Newcoin", None, None, "10"),
]


class TestSearch:
    def test_case_insensitive_substring(self) -> None:
        assert [c.id for c in search(COINS, "BITCOIN")] == ["bitcoin", "bitcoin-cash"]
        assert [c.id for c in search(COINS, "cash")] == ["bitcoin-cash"]

    def test_blank_term_returns_nothing(self) -> None:
        assert search(COINS, "") == []
        assert search(COINS, "   ") == []

    def test_limit(self) -> None:
        many = [_coin(f"coin{i}", f"Coin {i}", i, "1") for i in range(25)]
        assert len(search(many, "coin")) == 10
        assert len(search(many, "coin", limit=3)) == 3

    def test_no_match(self) -> None:
        assert search(COINS, "doge") == []


class TestSortCoins:
    def test_rank_ascending_puts_missing_last(self) -> None:
        assert [c.id for c in sort_coins(COINS, "rank")] == ["bitcoin", "ethereum", "bitcoin-cash", "newcoin"]

    def test_price_descending_puts_missing_last(self) -> None:
        result = sort_coins(COINS, "price", descending=True)
        assert [c.id for c in result] == ["bitcoin", "ethereum", "bitcoin-cash", "newcoin"]

    def test_change_ascending(self) -> None:
        result = sort_coins(COINS, "change_24h")
        assert [c.id for c in result] == ["ethereum", "bitcoin", "newcoin", "bitcoin-cash"]

    def test_name_is_case_insensitive(self) -> None:
        coins = [_coin("b", "beta", 2, "1"), _coin("a", "Alpha", 1, "1")]
        assert [c.id for c in sort_coins(coins, "name")] == ["a", "b"]

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(ValueError):
            sort_coins(COINS, "volume")

    def test_input_not_mutated(self) -> None:
        coins = list(COINS)
        sort_coins(coins, "price", descending=True)
        assert coins == COINS


class TestFavoritesAndTop:
    def test_filter_favorites_keeps_list_order(self) -> None:
        result = filter_favorites(COINS, {"newcoin", "bitcoin"})
        assert [c.id for c in result] == ["bitcoin", "newcoin"]

    def test_top_by_market_cap(self) -> None:
        assert [c.id for c in top_by_market_cap(COINS, 2)] == ["bitcoin", "ethereum"]
        assert len(top_by_market_cap(COINS, 10)) == 4


class TestPaginate:
    def test_pages_of_ten(self) -> None:
        items = list(range(25))
        page = paginate(items, 3)
        assert page.items == [20, 21, 22, 23, 24]
        assert page.total_pages == 3
        assert page.has_previous and not page.has_next

    def test_page_is_clamped(self) -> None:
        items = list(range(25))
        assert paginate(items, 0).page == 1
        assert paginate(items, 99).page == 3
        assert paginate(items, 99).items == [20, 21, 22, 23, 24]

    def test_empty_list_has_one_page(self) -> None:
        page = paginate([], 1)
        assert page.items == []
        assert page.total_pages == 1
        assert not page.has_next and not page.has_previous
