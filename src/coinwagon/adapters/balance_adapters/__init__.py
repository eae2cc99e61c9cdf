from __future__ import annotations

from .base import BaseBalanceAdapter
from .blockchair import BlockchairAdapter
from .blockcypher import BlockCypherAdapter

BALANCE_ADAPTERS: dict[str, type[BaseBalanceAdapter]] = {
    "blockcypher": BlockCypherAdapter,
    "blockchair": BlockchairAdapter,
}

__all__ = [
    "BALANCE_ADAPTERS",
    "BaseBalanceAdapter",
    "BlockCypherAdapter",
    "BlockchairAdapter",
]
