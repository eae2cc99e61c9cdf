from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from coinwagon.adapters.balance_adapters import BaseBalanceAdapter
from coinwagon.adapters.price_adapters import BasePriceAdapter
from coinwagon.domain import BalanceQuery, PriceQuery, ResolvedValue
from coinwagon.errors import FailureCause


class ScriptedBalanceAdapter(BaseBalanceAdapter):
    """Balance provider returning a fixed amount or failing with a fixed cause."""

    chain_key = "blockchair"

    def __init__(
        self,
        config,
        name: str,
        amount: str | None = None,
        cause: FailureCause | None = None,
        delay: float = 0.0,
        assets: set[str] | None = None,
    ):
        super().__init__(config)
        self._name = name
        self._amount = amount
        self._cause = cause
        self._delay = delay
        self._assets = assets
        self.calls: list[BalanceQuery] = []

    @property
    def adapter_name(self) -> str:
        return self._name

    def chain_for(self, asset: str) -> str | None:
        if self._assets is not None and asset not in self._assets:
            return None
        return super().chain_for(asset)

    async def fetch_balance(self, query: BalanceQuery, chain: str) -> ResolvedValue:
        self.calls.append(query)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._cause is not None:
            raise self.failure(self._cause, "scripted failure")
        assert self._amount is not None
        return ResolvedValue(Decimal(self._amount), query.asset, self._name)


class ScriptedPriceAdapter(BasePriceAdapter):
    """Price provider backed by an in-memory table of prices."""

    def __init__(self, config, prices: dict[str, str], name: str = "scripted"):
        super().__init__(config)
        self._name = name
        self.prices = dict(prices)
        self.calls: list[PriceQuery] = []

    @property
    def adapter_name(self) -> str:
        return self._name

    async def fetch_price(self, query: PriceQuery) -> ResolvedValue:
        self.calls.append(query)
        await asyncio.sleep(0)
        if query.asset not in self.prices:
            raise self.failure(FailureCause.NOT_FOUND, f"unknown asset {query.asset}")
        return ResolvedValue(Decimal(self.prices[query.asset]), query.fiat, self._name)


@pytest.fixture
def balance_adapter(config):
    def _make(name: str, **kwargs) -> ScriptedBalanceAdapter:
        return ScriptedBalanceAdapter(config, name, **kwargs)

    return _make


@pytest.fixture
def price_adapter(config):
    def _make(prices: dict[str, str], name: str = "scripted") -> ScriptedPriceAdapter:
        return ScriptedPriceAdapter(config, prices, name)

    return _make
