from __future__ import annotations

import logging

from ...domain import BalanceQuery, ResolvedValue
from ...errors import FailureCause
from ...settings import CoinwagonSettings
from .base import BaseBalanceAdapter

logger = logging.getLogger(__name__)


class BlockCypherAdapter(BaseBalanceAdapter):
    """Adapter for the BlockCypher address balance endpoint.

    Reads the confirmed ``balance`` field (base units); unconfirmed and
    final balances are ignored.
    """

    chain_key = "blockcypher"

    def __init__(self, config: CoinwagonSettings):
        super().__init__(config)
        self.api_base_url = config.blockcypher_api_url.rstrip("/")
        self._token = config.blockcypher_token

    @property
    def adapter_name(self) -> str:
        return "blockcypher"

    async def fetch_balance(self, query: BalanceQuery, chain: str) -> ResolvedValue:
        params = None
        if self._token is not None:
            params = {"token": self._token.get_secret_value()}

        data = await self._get_json(
            f"{self.api_base_url}/v1/{chain}/main/addrs/{query.address}/balance",
            params=params,
        )
        if not isinstance(data, dict):
            raise self.failure(
                FailureCause.MALFORMED, f"Invalid response structure: {data!r}"
            )
        if "error" in data:
            raise self.failure(FailureCause.NOT_FOUND, str(data["error"]))
        if "balance" not in data:
            raise self.failure(FailureCause.MALFORMED, "response has no balance field")

        balance = self._to_coins(data["balance"], query.asset)
        logger.debug(
            "Fetched balance from BlockCypher: %s %s", balance, query.asset.upper()
        )
        return ResolvedValue(amount=balance, unit=query.asset, source=self.adapter_name)
