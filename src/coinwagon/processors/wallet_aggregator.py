from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from decimal import Decimal

from ..domain import (
    AssetSubtotal,
    BalanceQuery,
    EntryFailure,
    LineItem,
    PriceQuery,
    WalletEntry,
    WalletReport,
    canonical_fiat,
)
from ..errors import ResolutionError
from ..resolution import ResolutionEngine

logger = logging.getLogger(__name__)

_EntryOutcome = tuple[LineItem | None, list[EntryFailure]]


async def _resolve_entry(
    engine: ResolutionEngine,
    entry: WalletEntry,
    fiat: str,
    semaphore: asyncio.Semaphore,
) -> _EntryOutcome:
    async with semaphore:
        try:
            balance = await engine.resolve(
                BalanceQuery(asset=entry.asset, address=entry.address)
            )
        except ResolutionError as e:
            logger.warning(
                "Balance lookup failed for %s %s: %s", entry.asset, entry.address, e
            )
            return None, [EntryFailure(entry=entry, stage="balance", error=e)]

        try:
            price = await engine.resolve(PriceQuery(asset=entry.asset, fiat=fiat))
        except ResolutionError as e:
            logger.warning("Price lookup failed for %s/%s: %s", entry.asset, fiat, e)
            item = LineItem(entry=entry, balance=balance)
            return item, [EntryFailure(entry=entry, stage="price", error=e)]

    converted = balance.amount * price.amount
    return (
        LineItem(entry=entry, balance=balance, price=price, converted_value=converted),
        [],
    )


async def aggregate_wallet(
    engine: ResolutionEngine,
    entries: Sequence[WalletEntry],
    fiat: str,
    max_concurrency: int = 5,
) -> WalletReport:
    """Resolve every wallet entry and fold the results into a report.

    Args:
        engine: Resolution engine used for balance and price lookups
        entries: Wallet entries in presentation order
        fiat: Currency to convert balances into
        max_concurrency: Upper bound on entries resolved at once

    Returns:
        A WalletReport whose line items and failures follow input order.

    A failing entry never aborts the report. A balance failure drops the
    entry from ``line_items``; a price failure keeps it with
    ``converted_value=None``. Both are listed in ``failures``.
    """
    fiat = canonical_fiat(fiat)
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    logger.info("Resolving %d wallet entries in %s...", len(entries), fiat.upper())
    outcomes = await asyncio.gather(
        *(_resolve_entry(engine, entry, fiat, semaphore) for entry in entries)
    )

    report = WalletReport(fiat=fiat)
    total = Decimal(0)
    for item, failures in outcomes:
        report.failures.extend(failures)
        if item is None:
            continue
        report.line_items.append(item)

        subtotal = report.subtotals.setdefault(item.balance.unit, AssetSubtotal())
        subtotal.balance += item.balance.amount
        if item.converted_value is not None:
            subtotal.converted_value += item.converted_value
            total += item.converted_value

    report.total = total
    logger.info(
        "Wallet resolved: %d line items, %d failures",
        len(report.line_items),
        len(report.failures),
    )
    return report
