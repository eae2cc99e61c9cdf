from __future__ import annotations

from .engine import ResolutionEngine, build_chain, build_resolution_engine
from .fallback import FallbackChain, FallbackResult, ProviderAttempt

__all__ = [
    "FallbackChain",
    "FallbackResult",
    "ProviderAttempt",
    "ResolutionEngine",
    "build_chain",
    "build_resolution_engine",
]
