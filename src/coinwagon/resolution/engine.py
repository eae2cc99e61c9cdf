"""Cache-fronted query resolution."""

from __future__ import annotations

import asyncio
import logging

from ..adapters import get_adapter_class
from ..cache import TTLCache
from ..domain import BalanceQuery, Operation, PriceQuery, Query, ResolvedValue
from ..settings import CoinwagonSettings
from .fallback import FallbackChain

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Resolves price and balance queries through a TTL cache and fallback chains.

    Concurrent resolves of the same cold key on one event loop share one
    upstream fetch: the first caller starts it and later callers await the
    same task. Callers on other loops (other threads sharing the engine)
    start their own fetch. Failures are never cached.
    """

    def __init__(
        self,
        cache: TTLCache,
        chains: dict[Operation, FallbackChain],
    ):
        self.cache = cache
        self.chains = chains
        self._inflight: dict[
            tuple[asyncio.AbstractEventLoop, str], asyncio.Task[ResolvedValue]
        ] = {}

    async def resolve(self, query: Query) -> ResolvedValue:
        """Return the value for ``query``, from cache when fresh.

        Raises:
            InvalidQueryError: If the query is malformed. No provider is called.
            AllProvidersFailedError: If every provider in the chain failed.
        """
        query.validate()
        key = query.cache_key

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        flight = (asyncio.get_running_loop(), key)
        pending = self._inflight.get(flight)
        if pending is not None:
            logger.debug("Joining in-flight fetch for %s", key)
            return await asyncio.shield(pending)

        logger.debug("Cache miss for %s", key)
        task = asyncio.create_task(self._fetch_and_store(query, flight))
        self._inflight[flight] = task
        return await asyncio.shield(task)

    async def _fetch_and_store(
        self, query: Query, flight: tuple[asyncio.AbstractEventLoop, str]
    ) -> ResolvedValue:
        chain = self.chains.get(query.operation)
        if chain is None:
            self._inflight.pop(flight, None)
            raise RuntimeError(
                f"No provider chain configured for {query.operation.value}"
            )
        try:
            result = await chain.execute(query)
        finally:
            self._inflight.pop(flight, None)
        self.cache.put(query.cache_key, result.value)
        return result.value

    async def get_price(self, asset: str, fiat: str) -> ResolvedValue:
        return await self.resolve(PriceQuery(asset=asset, fiat=fiat))

    async def get_balance(self, asset: str, address: str) -> ResolvedValue:
        return await self.resolve(BalanceQuery(asset=asset, address=address))


def build_chain(settings: CoinwagonSettings, operation: Operation) -> FallbackChain:
    """Instantiate the configured providers for ``operation`` in order.

    Raises:
        ValueError: If a configured provider name is unknown.
    """
    names = (
        settings.price_providers
        if operation == Operation.PRICE
        else settings.balance_providers
    )
    return FallbackChain(
        [get_adapter_class(operation, name)(settings) for name in names]
    )


def build_resolution_engine(
    settings: CoinwagonSettings, cache: TTLCache | None = None
) -> ResolutionEngine:
    if cache is None:
        cache = TTLCache(ttl_seconds=settings.cache_ttl_seconds)
    chains = {operation: build_chain(settings, operation) for operation in Operation}
    return ResolutionEngine(cache=cache, chains=chains)
