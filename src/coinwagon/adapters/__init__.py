from __future__ import annotations

from ..domain import Operation
from .balance_adapters import BALANCE_ADAPTERS
from .base import BaseProviderAdapter
from .price_adapters import PRICE_ADAPTERS

ADAPTER_REGISTRY: dict[Operation, dict[str, type[BaseProviderAdapter]]] = {
    Operation.PRICE: dict(PRICE_ADAPTERS),
    Operation.BALANCE: dict(BALANCE_ADAPTERS),
}


def get_adapter_class(
    operation: Operation, adapter_name: str
) -> type[BaseProviderAdapter]:
    """Get adapter class by operation and name.

    Args:
        operation: Which operation the adapter must serve
        adapter_name: Name of the adapter (case-insensitive)

    Returns:
        Adapter class

    Raises:
        ValueError: If adapter_name is not a known adapter for the operation
    """
    adapters = ADAPTER_REGISTRY[operation]
    adapter_name_normalized = adapter_name.lower()
    if adapter_name_normalized not in adapters:
        raise ValueError(
            f"Unknown {operation.value} provider '{adapter_name}'. "
            f"Available: {', '.join(adapters.keys())}"
        )
    return adapters[adapter_name_normalized]


__all__ = [
    "ADAPTER_REGISTRY",
    "BALANCE_ADAPTERS",
    "PRICE_ADAPTERS",
    "BaseProviderAdapter",
    "get_adapter_class",
]
