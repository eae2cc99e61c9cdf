from __future__ import annotations

from .formatter import (
    format_balance,
    format_price,
    format_wallet_report,
    render_wallet_table,
)

__all__ = [
    "format_balance",
    "format_price",
    "format_wallet_report",
    "render_wallet_table",
]
