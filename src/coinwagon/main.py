"""CLI entrypoint for coinwagon."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Awaitable
from pathlib import Path
from typing import Annotated, TypeVar

import typer

from .commands import Coinwagon
from .errors import CoinwagonError, InputError
from .logger import setup_logging
from .report import (
    format_balance,
    format_price,
    format_wallet_report,
    render_wallet_table,
)
from .settings import CoinwagonSettings
from .state import AppState

T = TypeVar("T")

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Cryptocurrency prices and address balances with provider fallback.",
)

VerboseOption = Annotated[
    bool,
    typer.Option(
        "--verbose",
        help="Log cache hits/misses and every provider attempt.",
    ),
]


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("coinwagon")


def _session(ctx: typer.Context, verbose: bool) -> Coinwagon:
    """Build settings, logging and a session from the global options."""
    options: dict[str, str | None] = ctx.obj or {}
    if options.get("config_path"):
        os.environ["COINWAGON_CONFIG"] = str(options["config_path"])

    init_kwargs: dict[str, str] = {}
    if options.get("log_level"):
        init_kwargs["log_level"] = str(options["log_level"]).upper()

    try:
        settings = CoinwagonSettings(**init_kwargs)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    setup_logging("DEBUG" if verbose else settings.log_level)
    try:
        state = AppState.from_settings(settings, logger=_build_logger())
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    return Coinwagon(state=state)


def _run(awaitable: Awaitable[T]) -> T:
    """Run a session coroutine, mapping coinwagon errors to exit codes."""

    async def _main() -> T:
        return await awaitable

    try:
        return asyncio.run(_main())
    except InputError as e:
        raise typer.BadParameter(str(e)) from e
    except CoinwagonError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [coinwagon] table).",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
):
    """Resolve prices and balances from public blockchain APIs."""
    ctx.obj = {"config_path": config_path, "log_level": log_level}


@app.command("current-price")
def current_price(
    ctx: typer.Context,
    asset: Annotated[str, typer.Argument(help="Cryptocurrency id (e.g., bitcoin).")],
    fiat: Annotated[str, typer.Argument(help="Fiat currency symbol (e.g., usd).")],
    verbose: VerboseOption = False,
):
    """Print the current spot price of ASSET in FIAT."""
    session = _session(ctx, verbose)
    price = _run(session.current_price(asset, fiat))
    typer.echo(format_price(price))


@app.command("address-balance")
def address_balance(
    ctx: typer.Context,
    asset: Annotated[str, typer.Argument(help="Cryptocurrency id (e.g., bitcoin).")],
    address: Annotated[str, typer.Argument(help="Wallet address.")],
    verbose: VerboseOption = False,
):
    """Print the confirmed balance of ADDRESS."""
    session = _session(ctx, verbose)
    balance = _run(session.address_balance(asset, address))
    typer.echo(format_balance(balance))


@app.command("wallet-balance")
def wallet_balance(
    ctx: typer.Context,
    wallet: Annotated[
        Path, typer.Argument(help="Path to wallet file (asset,address per line).")
    ],
    fiat: Annotated[str, typer.Argument(help="Fiat currency symbol (e.g., usd).")],
    verbose: VerboseOption = False,
    table: Annotated[
        bool,
        typer.Option("--table", help="Render the report as a rich table."),
    ] = False,
):
    """Print every wallet entry's balance and value, plus the total.

    Entries that fail are listed rather than aborting the report.
    """
    session = _session(ctx, verbose)
    report = _run(session.wallet_balance(wallet, fiat))
    if table:
        render_wallet_table(report)
    else:
        typer.echo(format_wallet_report(report))


@app.command("show-config")
def show_config(ctx: typer.Context):
    """Print effective config (with secrets redacted) and exit."""
    session = _session(ctx, verbose=False)
    typer.echo(json.dumps(session.settings.as_safe_dict(), indent=2, default=str))


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
