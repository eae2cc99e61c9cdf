import asyncio
from decimal import Decimal

import pytest

from coinwagon.adapters.balance_adapters import BlockchairAdapter, BlockCypherAdapter
from coinwagon.adapters.price_adapters import CoinGeckoAdapter
from coinwagon.cache import TTLCache
from coinwagon.domain import BalanceQuery, Operation, PriceQuery
from coinwagon.errors import AllProvidersFailedError, FailureCause, InvalidQueryError
from coinwagon.resolution import (
    FallbackChain,
    ResolutionEngine,
    build_chain,
    build_resolution_engine,
)
from coinwagon.settings import CoinwagonSettings


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def _engine(clock, price=None, balances=()):
    chains = {Operation.BALANCE: FallbackChain(list(balances))}
    if price is not None:
        chains[Operation.PRICE] = FallbackChain([price])
    return ResolutionEngine(TTLCache(ttl_seconds=300, clock=clock), chains)


@pytest.mark.asyncio
async def test_repeat_query_within_ttl_hits_provider_once(clock, price_adapter):
    prices = price_adapter({"bitcoin": "67234.50"})
    engine = _engine(clock, price=prices)

    first = await engine.get_price("bitcoin", "usd")
    clock.now += 299
    second = await engine.get_price("BTC", "USD")

    assert first == second
    assert first.amount == Decimal("67234.50")
    assert len(prices.calls) == 1


@pytest.mark.asyncio
async def test_expired_entry_is_refetched(clock, price_adapter):
    prices = price_adapter({"bitcoin": "100"})
    engine = _engine(clock, price=prices)

    await engine.get_price("bitcoin", "usd")
    prices.prices["bitcoin"] = "200"
    clock.now += 301

    value = await engine.get_price("bitcoin", "usd")

    assert value.amount == Decimal("200")
    assert len(prices.calls) == 2


@pytest.mark.asyncio
async def test_failures_are_not_cached(clock, price_adapter):
    prices = price_adapter({})
    engine = _engine(clock, price=prices)

    with pytest.raises(AllProvidersFailedError):
        await engine.get_price("bitcoin", "usd")
    prices.prices["bitcoin"] = "1"

    assert (await engine.get_price("bitcoin", "usd")).amount == Decimal("1")
    assert len(prices.calls) == 2


@pytest.mark.asyncio
async def test_invalid_query_fails_before_any_provider_call(clock, price_adapter):
    prices = price_adapter({"bitcoin": "1"})
    engine = _engine(clock, price=prices)

    with pytest.raises(InvalidQueryError):
        await engine.get_price("bitcoin", "")
    with pytest.raises(InvalidQueryError):
        await engine.resolve(BalanceQuery("bitcoin", "not an address"))

    assert prices.calls == []
    assert len(engine.cache) == 0


@pytest.mark.asyncio
async def test_balance_fallback_result_is_cached(clock, balance_adapter):
    primary = balance_adapter("primary", cause=FailureCause.TRANSIENT)
    secondary = balance_adapter("secondary", amount="1.5")
    engine = _engine(clock, balances=[primary, secondary])

    await engine.get_balance("bitcoin", "addrA")
    value = await engine.get_balance("bitcoin", "addrA")

    assert value.amount == Decimal("1.5")
    assert value.source == "secondary"
    assert len(primary.calls) == 1
    assert len(secondary.calls) == 1


@pytest.mark.asyncio
async def test_concurrent_cold_queries_share_one_fetch(clock, balance_adapter):
    slow = balance_adapter("slow", amount="2", delay=0.05)
    engine = _engine(clock, balances=[slow])

    results = await asyncio.gather(
        *(engine.get_balance("bitcoin", "addrA") for _ in range(5))
    )

    assert all(r.amount == Decimal("2") for r in results)
    assert len(slow.calls) == 1
    assert engine._inflight == {}


@pytest.mark.asyncio
async def test_concurrent_failure_is_shared_and_not_cached(clock, balance_adapter):
    slow = balance_adapter("slow", cause=FailureCause.TRANSIENT, delay=0.05)
    engine = _engine(clock, balances=[slow])

    results = await asyncio.gather(
        engine.get_balance("bitcoin", "addrA"),
        engine.get_balance("bitcoin", "addrA"),
        return_exceptions=True,
    )

    assert all(isinstance(r, AllProvidersFailedError) for r in results)
    assert len(slow.calls) == 1
    assert len(engine.cache) == 0


@pytest.mark.asyncio
async def test_distinct_keys_resolve_independently(clock, balance_adapter):
    adapter = balance_adapter("only", amount="1")
    engine = _engine(clock, balances=[adapter])

    await engine.get_balance("bitcoin", "addrA")
    await engine.get_balance("bitcoin", "addrB")
    await engine.get_balance("litecoin", "addrA")

    assert len(adapter.calls) == 3


@pytest.mark.asyncio
async def test_missing_chain_raises(clock):
    engine = ResolutionEngine(TTLCache(clock=clock), chains={})

    with pytest.raises(RuntimeError, match="No provider chain"):
        await engine.resolve(PriceQuery("bitcoin", "usd"))
    assert engine._inflight == {}


def test_build_chain_follows_configured_order():
    settings = CoinwagonSettings(balance_providers=["blockchair", "blockcypher"])

    chain = build_chain(settings, Operation.BALANCE)

    assert [type(p) for p in chain.providers] == [BlockchairAdapter, BlockCypherAdapter]


def test_build_chain_rejects_unknown_provider():
    settings = CoinwagonSettings(price_providers=["coingecko", "nope"])

    with pytest.raises(ValueError, match="Unknown price provider 'nope'"):
        build_chain(settings, Operation.PRICE)


def test_build_resolution_engine_uses_configured_ttl():
    engine = build_resolution_engine(CoinwagonSettings(cache_ttl_seconds=42))

    assert engine.cache.ttl_seconds == 42
    assert isinstance(engine.chains[Operation.PRICE].providers[0], CoinGeckoAdapter)
    assert engine.chains[Operation.BALANCE].provider_names == [
        "blockcypher",
        "blockchair",
    ]
