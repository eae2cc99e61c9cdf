from __future__ import annotations

import logging
from typing import Any

from ...domain import BalanceQuery, ResolvedValue
from ...errors import FailureCause
from ...settings import CoinwagonSettings
from .base import BaseBalanceAdapter

logger = logging.getLogger(__name__)


class BlockchairAdapter(BaseBalanceAdapter):
    """Adapter for the Blockchair address dashboard endpoint.

    Blockchair has shipped a few response layouts over time; the balance
    is looked up in order at ``data[address].address.balance``,
    ``data[address].balance`` and a top-level ``balance``.
    """

    chain_key = "blockchair"

    def __init__(self, config: CoinwagonSettings):
        super().__init__(config)
        self.api_base_url = config.blockchair_api_url.rstrip("/")
        self._api_key = config.blockchair_api_key

    @property
    def adapter_name(self) -> str:
        return "blockchair"

    def _extract_balance(self, data: dict[str, Any], address: str) -> Any:
        if "data" not in data:
            if "balance" in data:
                return data["balance"]
            raise self.failure(FailureCause.MALFORMED, "response has no data field")

        body = data["data"]
        if not isinstance(body, dict):
            # An empty list instead of a mapping means no match.
            raise self.failure(FailureCause.NOT_FOUND, f"address {address} not found")

        # Keys may be lowercased for case-insensitive chains.
        addr_data = body.get(address)
        if addr_data is None:
            addr_data = body.get(address.lower())
        if addr_data is None:
            raise self.failure(FailureCause.NOT_FOUND, f"address {address} not found")
        if not isinstance(addr_data, dict):
            raise self.failure(
                FailureCause.MALFORMED, f"Invalid address entry: {addr_data!r}"
            )

        address_info = addr_data.get("address")
        if isinstance(address_info, dict) and "balance" in address_info:
            return address_info["balance"]
        if "balance" in addr_data:
            return addr_data["balance"]
        raise self.failure(
            FailureCause.MALFORMED, "could not locate balance in response"
        )

    async def fetch_balance(self, query: BalanceQuery, chain: str) -> ResolvedValue:
        params = None
        if self._api_key is not None:
            params = {"key": self._api_key.get_secret_value()}

        data = await self._get_json(
            f"{self.api_base_url}/{chain}/dashboards/address/{query.address}",
            params=params,
        )
        if not isinstance(data, dict):
            raise self.failure(
                FailureCause.MALFORMED, f"Invalid response structure: {data!r}"
            )

        raw_balance = self._extract_balance(data, query.address)
        balance = self._to_coins(raw_balance, query.asset)
        logger.debug(
            "Fetched balance from Blockchair: %s %s", balance, query.asset.upper()
        )
        return ResolvedValue(amount=balance, unit=query.asset, source=self.adapter_name)
