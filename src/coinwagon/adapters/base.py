from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any

import requests

from ..domain import Operation, Query, ResolvedValue
from ..errors import FailureCause, ProviderFailure
from ..settings import CoinwagonSettings

logger = logging.getLogger(__name__)

NOT_FOUND_STATUSES = {400, 404, 422}


class BaseProviderAdapter(ABC):
    """Abstract base class for upstream data providers.

    One adapter maps a query onto a single upstream API request and parses
    the response into a ResolvedValue. Adapters never retry; the fallback
    chain moves on to the next provider instead.
    """

    operation: Operation

    def __init__(self, config: CoinwagonSettings):
        """Initialize the adapter with configuration."""
        self.config = config
        self.timeout = config.request_timeout_seconds

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    def supports(self, query: Query) -> bool:
        """Whether this provider can serve the query at all."""
        return query.operation == self.operation

    @abstractmethod
    async def fetch(self, query: Query) -> ResolvedValue:
        """Fetch and normalize a value for the query.

        Raises:
            ProviderFailure: On any failure, tagged with its cause.
        """
        ...

    def failure(self, cause: FailureCause, message: str) -> ProviderFailure:
        return ProviderFailure(cause, self.adapter_name, message)

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET a JSON document, mapping every failure onto a ProviderFailure.

        The request is bounded twice: by the requests socket timeout and by
        an asyncio deadline around the worker thread.
        """
        logger.debug("%s: GET %s", self.adapter_name, url)
        try:
            async with asyncio.timeout(self.timeout):
                response = await asyncio.to_thread(
                    requests.get,
                    url,
                    params=params,
                    headers=headers,
                    timeout=self.timeout,
                )
        except TimeoutError as e:
            raise self.failure(
                FailureCause.TRANSIENT, f"request timed out after {self.timeout}s"
            ) from e
        except requests.exceptions.RequestException as e:
            raise self.failure(FailureCause.TRANSIENT, f"request failed: {e}") from e

        status = response.status_code
        if status == 429:
            raise self.failure(FailureCause.TRANSIENT, "rate limited (HTTP 429)")
        if status in NOT_FOUND_STATUSES:
            raise self.failure(FailureCause.NOT_FOUND, f"HTTP {status}")
        if not 200 <= status < 300:
            raise self.failure(FailureCause.TRANSIENT, f"HTTP {status}")

        try:
            return response.json(parse_float=Decimal)
        except ValueError as e:
            raise self.failure(FailureCause.MALFORMED, "invalid JSON response") from e

    def _to_decimal(self, value: Any, what: str) -> Decimal:
        """Convert a JSON scalar to Decimal without passing through float."""
        if isinstance(value, bool) or value is None:
            raise self.failure(
                FailureCause.MALFORMED, f"{what} is not numeric: {value!r}"
            )
        try:
            amount = Decimal(str(value))
        except InvalidOperation as e:
            raise self.failure(
                FailureCause.MALFORMED, f"{what} is not numeric: {value!r}"
            ) from e
        if not amount.is_finite():
            raise self.failure(
                FailureCause.MALFORMED, f"{what} is not finite: {value!r}"
            )
        return amount
