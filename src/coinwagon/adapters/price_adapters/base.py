from __future__ import annotations

from abc import abstractmethod

from ...domain import Operation, PriceQuery, Query, ResolvedValue
from ..base import BaseProviderAdapter


class BasePriceAdapter(BaseProviderAdapter):
    """Abstract base class for spot price providers."""

    operation = Operation.PRICE

    async def fetch(self, query: Query) -> ResolvedValue:
        if not isinstance(query, PriceQuery):
            raise TypeError(f"{self.adapter_name} only serves price queries")
        return await self.fetch_price(query)

    @abstractmethod
    async def fetch_price(self, query: PriceQuery) -> ResolvedValue:
        """Fetch the price of one ``query.asset`` unit in ``query.fiat``."""
        ...
