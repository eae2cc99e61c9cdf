from decimal import Decimal

import pytest

from coinwagon.adapters.price_adapters import CoinGeckoAdapter
from coinwagon.domain import BalanceQuery, PriceQuery
from coinwagon.errors import FailureCause, ProviderFailure
from coinwagon.settings import CoinwagonSettings


@pytest.mark.asyncio
async def test_fetch_price(config, http):
    http.respond(body={"bitcoin": {"usd": 67234.5}})
    adapter = CoinGeckoAdapter(config)

    value = await adapter.fetch(PriceQuery("bitcoin", "usd"))

    assert value.amount == Decimal("67234.5")
    assert value.unit == "usd"
    assert value.source == "coingecko"
    assert http.calls[0]["url"] == "https://api.coingecko.com/api/v3/simple/price"
    assert http.calls[0]["params"] == {"ids": "bitcoin", "vs_currencies": "usd"}
    assert http.calls[0]["headers"] is None


@pytest.mark.asyncio
async def test_price_is_parsed_without_float_rounding(config, http):
    http.respond(text='{"bitcoin": {"usd": 67234.123456789012345}}')
    adapter = CoinGeckoAdapter(config)

    value = await adapter.fetch(PriceQuery("bitcoin", "usd"))

    assert value.amount == Decimal("67234.123456789012345")


@pytest.mark.asyncio
async def test_api_key_sent_as_header(http):
    settings = CoinwagonSettings(coingecko_api_key="demo-key")
    http.respond(body={"ethereum": {"eur": 3000}})

    await CoinGeckoAdapter(settings).fetch(PriceQuery("eth", "eur"))

    assert http.calls[0]["headers"] == {"x-cg-demo-api-key": "demo-key"}
    assert http.calls[0]["params"]["ids"] == "ethereum"


@pytest.mark.asyncio
async def test_unknown_asset_is_not_found(config, http):
    http.respond(body={})

    with pytest.raises(ProviderFailure) as exc_info:
        await CoinGeckoAdapter(config).fetch(PriceQuery("notacoin", "usd"))

    assert exc_info.value.cause is FailureCause.NOT_FOUND


@pytest.mark.asyncio
async def test_missing_fiat_quote_is_not_found(config, http):
    http.respond(body={"bitcoin": {}})

    with pytest.raises(ProviderFailure) as exc_info:
        await CoinGeckoAdapter(config).fetch(PriceQuery("bitcoin", "xyz"))

    assert exc_info.value.cause is FailureCause.NOT_FOUND


@pytest.mark.parametrize(
    "body",
    [
        [],
        {"bitcoin": 5},
        {"bitcoin": {"usd": "not-a-number"}},
        {"bitcoin": {"usd": None}},
        {"bitcoin": {"usd": 0}},
        {"bitcoin": {"usd": -1}},
    ],
)
@pytest.mark.asyncio
async def test_malformed_payloads(config, http, body):
    http.respond(body=body)

    with pytest.raises(ProviderFailure) as exc_info:
        await CoinGeckoAdapter(config).fetch(PriceQuery("bitcoin", "usd"))

    assert exc_info.value.cause is FailureCause.MALFORMED


def test_price_adapter_does_not_support_balance_queries(config):
    adapter = CoinGeckoAdapter(config)

    assert adapter.supports(PriceQuery("bitcoin", "usd"))
    assert not adapter.supports(BalanceQuery("bitcoin", "addrA"))
