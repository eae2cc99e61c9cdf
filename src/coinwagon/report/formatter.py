"""Text and rich console formatting for command results."""

from __future__ import annotations

from decimal import Decimal

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..domain import EntryFailure, ResolvedValue, WalletReport, canonical_asset
from ..units import format_amount

FIAT_MIN_PLACES = 2


def _format_fiat(amount: Decimal, fiat: str) -> str:
    return f"{format_amount(amount, FIAT_MIN_PLACES)} {fiat.upper()}"


def format_price(price: ResolvedValue) -> str:
    """Format a price as ``67234.50 USD``."""
    return _format_fiat(price.amount, price.unit)


def format_balance(balance: ResolvedValue) -> str:
    """Format a balance as ``1.5 BITCOIN``."""
    return f"{format_amount(balance.amount)} {balance.unit.upper()}"


def format_wallet_report(report: WalletReport) -> str:
    """Render a wallet report as plain text, one line per entry.

    Line items come first in input order, then failures, then the total.
    """
    lines: list[str] = []
    for item in report.line_items:
        asset = item.balance.unit.upper()
        if item.converted_value is None:
            value = "unavailable"
        else:
            value = _format_fiat(item.converted_value, report.fiat)
        lines.append(
            f"{asset} {item.address}: {format_balance(item.balance)} = {value}"
        )

    for failure in report.failures:
        lines.append(
            f"FAILED {_failure_asset(failure)} {failure.entry.address} "
            f"({failure.stage}): {failure.cause}"
        )

    lines.append(f"Total: {_format_fiat(report.total, report.fiat)}")
    return "\n".join(lines)


def _failure_asset(failure: EntryFailure) -> str:
    return canonical_asset(failure.entry.asset).upper()


def _truncate_address(address: str) -> str:
    """Truncate address for display."""
    if len(address) <= 18:
        return address
    return f"{address[:10]}...{address[-4:]}"


def render_wallet_table(report: WalletReport, console: Console | None = None) -> None:
    """Print a rich table of the wallet report to the console."""
    console = console or Console()
    fiat = report.fiat.upper()

    table = Table(expand=True, show_lines=False)
    table.add_column("Asset", style="cyan", no_wrap=True)
    table.add_column("Address", style="dim")
    table.add_column("Balance", justify="right")
    table.add_column("Price", justify="right", style="yellow")
    table.add_column(f"Value ({fiat})", justify="right", style="green")

    for item in report.line_items:
        table.add_row(
            item.balance.unit.upper(),
            escape(_truncate_address(item.address)),
            format_amount(item.balance.amount),
            format_amount(item.price.amount, FIAT_MIN_PLACES) if item.price else "-",
            (
                format_amount(item.converted_value, FIAT_MIN_PLACES)
                if item.converted_value is not None
                else "[dim]<N/A>[/]"
            ),
        )

    table.add_row(
        "[bold]TOTAL[/]",
        "",
        "",
        "",
        f"[bold]{format_amount(report.total, FIAT_MIN_PLACES)}[/]",
        style="bold",
    )

    console.print(Panel(table, title="[bold]Wallet Balance[/]", border_style="cyan"))

    if report.failures:
        failures = Table(show_header=True, expand=True)
        failures.add_column("Asset", style="cyan", no_wrap=True)
        failures.add_column("Address", style="dim")
        failures.add_column("Stage")
        failures.add_column("Error", style="red")
        for failure in report.failures:
            failures.add_row(
                escape(_failure_asset(failure)),
                escape(_truncate_address(failure.entry.address)),
                failure.stage,
                escape(failure.cause),
            )
        console.print(Panel(failures, title="[bold]Failures[/]", border_style="red"))
