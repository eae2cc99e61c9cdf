from __future__ import annotations

from .wallet_aggregator import aggregate_wallet

__all__ = ["aggregate_wallet"]
