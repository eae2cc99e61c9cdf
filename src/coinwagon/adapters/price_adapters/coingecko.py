from __future__ import annotations

import logging

from ...domain import PriceQuery, ResolvedValue
from ...errors import FailureCause
from ...settings import CoinwagonSettings
from .base import BasePriceAdapter

logger = logging.getLogger(__name__)


class CoinGeckoAdapter(BasePriceAdapter):
    """Adapter for the CoinGecko simple price endpoint.

    Asset symbols are CoinGecko coin ids (``bitcoin``, ``ethereum``) and
    fiat symbols are its ``vs_currencies`` (``usd``, ``eur``).
    """

    def __init__(self, config: CoinwagonSettings):
        super().__init__(config)
        self.api_base_url = config.coingecko_api_url.rstrip("/")
        self._api_key = config.coingecko_api_key

    @property
    def adapter_name(self) -> str:
        return "coingecko"

    async def fetch_price(self, query: PriceQuery) -> ResolvedValue:
        headers = None
        if self._api_key is not None:
            headers = {"x-cg-demo-api-key": self._api_key.get_secret_value()}

        data = await self._get_json(
            f"{self.api_base_url}/simple/price",
            params={"ids": query.asset, "vs_currencies": query.fiat},
            headers=headers,
        )
        if not isinstance(data, dict):
            raise self.failure(
                FailureCause.MALFORMED, f"Invalid response structure: {data!r}"
            )

        asset_prices = data.get(query.asset)
        if asset_prices is None:
            raise self.failure(FailureCause.NOT_FOUND, f"unknown asset {query.asset}")
        if not isinstance(asset_prices, dict):
            raise self.failure(
                FailureCause.MALFORMED, f"Invalid price entry: {asset_prices!r}"
            )
        if query.fiat not in asset_prices:
            raise self.failure(
                FailureCause.NOT_FOUND, f"no {query.fiat} quote for {query.asset}"
            )

        price = self._to_decimal(asset_prices[query.fiat], "price")
        if price <= 0:
            raise self.failure(FailureCause.MALFORMED, f"non-positive price {price}")

        logger.debug("%s/%s price from CoinGecko: %s", query.asset, query.fiat, price)
        return ResolvedValue(amount=price, unit=query.fiat, source=self.adapter_name)
