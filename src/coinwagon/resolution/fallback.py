"""Ordered provider fallback."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..adapters.base import BaseProviderAdapter
from ..domain import Query, ResolvedValue
from ..errors import AllProvidersFailedError, FailureCause, ProviderFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderAttempt:
    """Outcome of one provider in a chain execution. ``cause`` is None on success."""

    provider: str
    cause: FailureCause | None = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.cause is None

    def __str__(self) -> str:
        if self.cause is None:
            return f"{self.provider}: ok"
        return f"{self.provider} ({self.cause.value}): {self.message}"


@dataclass
class FallbackResult:
    value: ResolvedValue
    provider: str
    attempts: list[ProviderAttempt] = field(default_factory=list)


class FallbackChain:
    """Tries providers strictly in order until one succeeds.

    Provider N is only started once provider N-1 has failed. Providers that
    do not support the query are recorded as UNSUPPORTED without being called.
    """

    def __init__(self, providers: Sequence[BaseProviderAdapter]):
        self.providers = list(providers)

    @property
    def provider_names(self) -> list[str]:
        return [p.adapter_name for p in self.providers]

    async def execute(self, query: Query) -> FallbackResult:
        """Resolve ``query`` through the chain.

        Raises:
            AllProvidersFailedError: If no provider produced a value. The error
                carries every attempt in order.
        """
        attempts: list[ProviderAttempt] = []

        for provider in self.providers:
            name = provider.adapter_name
            if not provider.supports(query):
                logger.debug("Skipping %s for %s: unsupported", name, query.describe())
                attempts.append(
                    ProviderAttempt(
                        name, FailureCause.UNSUPPORTED, "query not supported"
                    )
                )
                continue

            logger.debug("Trying %s for %s", name, query.describe())
            try:
                value = await provider.fetch(query)
            except ProviderFailure as e:
                attempts.append(ProviderAttempt(name, e.cause, e.message))
                if e.cause == FailureCause.MALFORMED:
                    logger.warning(
                        "%s returned a malformed response: %s", name, e.message
                    )
                else:
                    logger.debug("%s failed (%s): %s", name, e.cause.value, e.message)
                continue

            attempts.append(ProviderAttempt(name))
            logger.debug(
                "%s resolved %s: %s %s",
                name,
                query.describe(),
                value.amount,
                value.unit,
            )
            return FallbackResult(value=value, provider=name, attempts=attempts)

        raise AllProvidersFailedError(query, attempts)
