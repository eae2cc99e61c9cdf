from __future__ import annotations

from .base import BasePriceAdapter
from .coingecko import CoinGeckoAdapter

PRICE_ADAPTERS: dict[str, type[BasePriceAdapter]] = {
    "coingecko": CoinGeckoAdapter,
}

__all__ = ["PRICE_ADAPTERS", "BasePriceAdapter", "CoinGeckoAdapter"]
