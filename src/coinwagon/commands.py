"""Command dispatch: the ``run_command(command, args)`` library entry point."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TypeVar, Union

from .domain import ResolvedValue, WalletReport, canonical_fiat, validate_fiat
from .errors import CommandTimeoutError, InvalidArgumentsError
from .logger import verbose_logging
from .processors import aggregate_wallet
from .report import format_balance, format_price, format_wallet_report
from .settings import CoinwagonSettings
from .state import AppState
from .wallet_file import load_wallet_file

T = TypeVar("T")

VERBOSE_FLAG = "--verbose"


class Command(str, Enum):
    CURRENT_PRICE = "current-price"
    ADDRESS_BALANCE = "address-balance"
    WALLET_BALANCE = "wallet-balance"


@dataclass(frozen=True)
class PriceRequest:
    asset: str
    fiat: str
    verbose: bool = False


@dataclass(frozen=True)
class BalanceRequest:
    asset: str
    address: str
    verbose: bool = False


@dataclass(frozen=True)
class WalletRequest:
    wallet_path: Path
    fiat: str
    verbose: bool = False


CommandRequest = Union[PriceRequest, BalanceRequest, WalletRequest]

_USAGE = {
    Command.CURRENT_PRICE: "current-price <asset> <fiat> [--verbose]",
    Command.ADDRESS_BALANCE: "address-balance <asset> <address> [--verbose]",
    Command.WALLET_BALANCE: "wallet-balance <wallet_file> <fiat> [--verbose]",
}


def parse_command(command: str, args: Sequence[str]) -> CommandRequest:
    """Turn a command name and raw argument list into a typed request.

    ``--verbose`` may appear anywhere in ``args``.

    Raises:
        InvalidArgumentsError: For an unknown command, an unknown flag, or a
            wrong number of positional arguments.
    """
    try:
        kind = Command(command)
    except ValueError:
        available = ", ".join(c.value for c in Command)
        raise InvalidArgumentsError(
            f"Unknown command {command!r}. Available: {available}"
        ) from None

    verbose = False
    positional: list[str] = []
    for arg in args:
        if arg == VERBOSE_FLAG:
            verbose = True
        elif arg.startswith("--"):
            raise InvalidArgumentsError(
                f"Unknown option {arg!r}. Usage: {_USAGE[kind]}"
            )
        else:
            positional.append(arg)

    if len(positional) != 2:
        raise InvalidArgumentsError(
            f"{kind.value} expects 2 arguments, got {len(positional)}. "
            f"Usage: {_USAGE[kind]}"
        )

    first, second = positional
    if kind is Command.CURRENT_PRICE:
        return PriceRequest(asset=first, fiat=second, verbose=verbose)
    if kind is Command.ADDRESS_BALANCE:
        return BalanceRequest(asset=first, address=second, verbose=verbose)
    return WalletRequest(wallet_path=Path(first), fiat=second, verbose=verbose)


class Coinwagon:
    """A resolution session. Create once and reuse to keep the cache warm."""

    def __init__(
        self,
        settings: CoinwagonSettings | None = None,
        *,
        state: AppState | None = None,
    ):
        if state is None:
            state = AppState.from_settings(settings or CoinwagonSettings())
        self.state = state

    @property
    def settings(self) -> CoinwagonSettings:
        return self.state.settings

    async def _with_deadline(self, awaitable: Awaitable[T], description: str) -> T:
        s = self.settings
        if not s.global_timeout_enabled:
            return await awaitable
        try:
            async with asyncio.timeout(s.global_timeout_seconds):
                return await awaitable
        except TimeoutError as exc:
            self.state.logger.error(
                "Command timed out",
                extra={
                    "command": description,
                    "timeout_seconds": s.global_timeout_seconds,
                },
            )
            raise CommandTimeoutError(
                f"{description} exceeded global timeout {s.global_timeout_seconds}s\n"
                " N.B. This can be changed via `global_timeout_seconds`."
            ) from exc

    async def current_price(self, asset: str, fiat: str) -> ResolvedValue:
        return await self._with_deadline(
            self.state.engine.get_price(asset, fiat), Command.CURRENT_PRICE.value
        )

    async def address_balance(self, asset: str, address: str) -> ResolvedValue:
        return await self._with_deadline(
            self.state.engine.get_balance(asset, address),
            Command.ADDRESS_BALANCE.value,
        )

    async def wallet_balance(self, wallet_path: str | Path, fiat: str) -> WalletReport:
        """Aggregate every entry of a wallet file.

        Raises:
            InvalidQueryError: If ``fiat`` is malformed.
            WalletFileError: If the wallet file cannot be read or parsed.
        """
        fiat = canonical_fiat(fiat)
        validate_fiat(fiat)
        entries = load_wallet_file(wallet_path)
        self.state.logger.debug(
            "Loaded %d wallet entries from %s", len(entries), wallet_path
        )
        return await self._with_deadline(
            aggregate_wallet(
                self.state.engine,
                entries,
                fiat,
                max_concurrency=self.settings.max_concurrent_lookups,
            ),
            Command.WALLET_BALANCE.value,
        )

    async def execute(self, request: CommandRequest) -> str:
        """Run a parsed request and return its formatted output."""
        if isinstance(request, PriceRequest):
            return format_price(await self.current_price(request.asset, request.fiat))
        if isinstance(request, BalanceRequest):
            return format_balance(
                await self.address_balance(request.asset, request.address)
            )
        report = await self.wallet_balance(request.wallet_path, request.fiat)
        return format_wallet_report(report)

    def run_command(self, command: str, args: Sequence[str]) -> str:
        """Parse and run one command synchronously.

        Must not be called from inside a running event loop; async callers
        should ``await execute(parse_command(...))`` instead.
        """
        request = parse_command(command, args)
        with verbose_logging(request.verbose):
            return asyncio.run(self.execute(request))


def run_command(
    command: str, args: Sequence[str], session: Coinwagon | None = None
) -> str:
    """Library entry point: ``run_command("current-price", ["bitcoin", "usd"])``.

    Without a ``session`` a fresh one (with an empty cache) is created for
    this call only.
    """
    return (session or Coinwagon()).run_command(command, args)
