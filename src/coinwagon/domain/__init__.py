"""Domain models for price and balance resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Literal, Union

from ..constants import ASSET_ALIASES
from ..errors import InvalidQueryError, ResolutionError

_ASSET_RE = re.compile(r"^[a-z0-9][a-z0-9-]{0,63}$")
_FIAT_RE = re.compile(r"^[a-z0-9]{2,10}$")
_ADDRESS_RE = re.compile(r"^[A-Za-z0-9:]{1,128}$")


class Operation(str, Enum):
    PRICE = "price"
    BALANCE = "balance"


def canonical_asset(asset: str) -> str:
    """Lowercase an asset symbol and resolve ticker aliases (btc -> bitcoin)."""
    symbol = asset.strip().lower()
    return ASSET_ALIASES.get(symbol, symbol)


def canonical_fiat(fiat: str) -> str:
    return fiat.strip().lower()


def _validate_asset(asset: str) -> None:
    if not _ASSET_RE.match(asset):
        raise InvalidQueryError(f"Invalid asset symbol: {asset!r}")


def validate_fiat(fiat: str) -> None:
    """Raise InvalidQueryError unless ``fiat`` is a canonical fiat symbol."""
    if not _FIAT_RE.match(fiat):
        raise InvalidQueryError(f"Invalid fiat symbol: {fiat!r}")


@dataclass(frozen=True)
class PriceQuery:
    """Spot price of one unit of ``asset`` in ``fiat``."""

    asset: str
    fiat: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "asset", canonical_asset(self.asset))
        object.__setattr__(self, "fiat", canonical_fiat(self.fiat))

    @property
    def operation(self) -> Operation:
        return Operation.PRICE

    @property
    def cache_key(self) -> str:
        return f"price:{self.asset}:{self.fiat}"

    def validate(self) -> None:
        _validate_asset(self.asset)
        validate_fiat(self.fiat)

    def describe(self) -> str:
        return f"{self.asset}/{self.fiat} price"


@dataclass(frozen=True)
class BalanceQuery:
    """Confirmed balance of ``address`` on the ``asset`` chain."""

    asset: str
    address: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "asset", canonical_asset(self.asset))
        object.__setattr__(self, "address", self.address.strip())

    @property
    def operation(self) -> Operation:
        return Operation.BALANCE

    @property
    def cache_key(self) -> str:
        return f"balance:{self.asset}:{self.address}"

    def validate(self) -> None:
        _validate_asset(self.asset)
        if not _ADDRESS_RE.match(self.address):
            raise InvalidQueryError(f"Invalid address: {self.address!r}")

    def describe(self) -> str:
        return f"{self.asset} balance of {self.address}"


Query = Union[PriceQuery, BalanceQuery]


@dataclass(frozen=True)
class ResolvedValue:
    """A normalized provider result.

    For prices ``amount`` is the price of one asset unit and ``unit`` the
    fiat symbol; for balances ``unit`` is the asset symbol.
    """

    amount: Decimal
    unit: str
    source: str = field(default="", compare=False)


@dataclass(frozen=True)
class WalletEntry:
    asset: str
    address: str
    line_number: int | None = field(default=None, compare=False)


@dataclass(frozen=True)
class LineItem:
    entry: WalletEntry
    balance: ResolvedValue
    price: ResolvedValue | None = None
    converted_value: Decimal | None = None

    @property
    def asset(self) -> str:
        return self.entry.asset

    @property
    def address(self) -> str:
        return self.entry.address


@dataclass(frozen=True)
class EntryFailure:
    entry: WalletEntry
    stage: Literal["balance", "price"]
    error: ResolutionError

    @property
    def cause(self) -> str:
        return str(self.error)


@dataclass
class AssetSubtotal:
    balance: Decimal = Decimal(0)
    converted_value: Decimal = Decimal(0)


@dataclass
class WalletReport:
    """Result of aggregating a wallet; built fresh per call."""

    fiat: str
    line_items: list[LineItem] = field(default_factory=list)
    failures: list[EntryFailure] = field(default_factory=list)
    total: Decimal = Decimal(0)
    subtotals: dict[str, AssetSubtotal] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.failures


__all__ = [
    "AssetSubtotal",
    "BalanceQuery",
    "EntryFailure",
    "LineItem",
    "Operation",
    "PriceQuery",
    "Query",
    "ResolvedValue",
    "WalletEntry",
    "WalletReport",
    "canonical_asset",
    "canonical_fiat",
    "validate_fiat",
]
