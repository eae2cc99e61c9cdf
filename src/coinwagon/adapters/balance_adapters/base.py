from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal

from ...constants import SUPPORTED_CHAINS
from ...domain import BalanceQuery, Operation, Query, ResolvedValue
from ...errors import FailureCause
from ...units import from_base_units
from ..base import BaseProviderAdapter


class BaseBalanceAdapter(BaseProviderAdapter):
    """Abstract base class for address balance providers.

    Subclasses name their chain code per asset via ``chain_key``; assets
    without a code are unsupported and never sent to the provider.
    """

    operation = Operation.BALANCE
    chain_key: str

    def chain_for(self, asset: str) -> str | None:
        chains = SUPPORTED_CHAINS.get(asset)
        if chains is None:
            return None
        return chains.get(self.chain_key)  # type: ignore[return-value]

    def supports(self, query: Query) -> bool:
        return super().supports(query) and self.chain_for(query.asset) is not None

    async def fetch(self, query: Query) -> ResolvedValue:
        if not isinstance(query, BalanceQuery):
            raise TypeError(f"{self.adapter_name} only serves balance queries")
        chain = self.chain_for(query.asset)
        if chain is None:
            raise self.failure(
                FailureCause.UNSUPPORTED, f"asset {query.asset} not supported"
            )
        return await self.fetch_balance(query, chain)

    @abstractmethod
    async def fetch_balance(self, query: BalanceQuery, chain: str) -> ResolvedValue:
        """Fetch the confirmed balance of ``query.address`` on ``chain``."""
        ...

    def _to_coins(self, raw_balance: object, asset: str) -> Decimal:
        """Scale a base-unit balance from the provider to whole coins."""
        decimals = SUPPORTED_CHAINS[asset]["decimals"]
        amount = self._to_decimal(raw_balance, "balance")
        try:
            return from_base_units(amount, decimals)
        except ValueError as e:
            raise self.failure(FailureCause.MALFORMED, str(e)) from e
