"""Exception hierarchy shared across coinwagon."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .domain import Query
    from .resolution.fallback import ProviderAttempt


class FailureCause(str, Enum):
    """Why a single provider could not serve a query."""

    TRANSIENT = "transient"
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"
    UNSUPPORTED = "unsupported"


class CoinwagonError(Exception):
    """Base class for all coinwagon errors."""


class InputError(CoinwagonError):
    """The caller supplied invalid input; retrying will not help."""


class InvalidArgumentsError(InputError):
    """Unknown command, unknown flag, or wrong number of arguments."""


class ResolutionError(CoinwagonError):
    """A query could not be resolved."""


class InvalidQueryError(InputError, ResolutionError):
    """A query was rejected before any network call was made."""


class AllProvidersFailedError(ResolutionError):
    """Every provider in a fallback chain failed for a query."""

    def __init__(self, query: Query, attempts: list[ProviderAttempt]):
        self.query = query
        self.attempts = list(attempts)
        if self.attempts:
            details = "; ".join(str(attempt) for attempt in self.attempts)
        else:
            details = "no providers configured"
        super().__init__(f"All providers failed for {query.describe()}: {details}")

    @property
    def causes(self) -> list[FailureCause]:
        return [a.cause for a in self.attempts if a.cause is not None]


class ProviderFailure(CoinwagonError):
    """A single provider call failed. Consumed by the fallback chain."""

    def __init__(self, cause: FailureCause, provider: str, message: str):
        self.cause = cause
        self.provider = provider
        self.message = message
        super().__init__(f"{provider} ({cause.value}): {message}")


class WalletFileError(CoinwagonError):
    """The wallet file is missing, unreadable, or malformed."""


class CommandTimeoutError(CoinwagonError, TimeoutError):
    """A command exceeded the global deadline."""
