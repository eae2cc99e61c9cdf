"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .resolution import ResolutionEngine, build_resolution_engine
from .settings import CoinwagonSettings


@dataclass
class AppState:
    """Container for session-wide state and dependencies.

    Owns the resolution engine (and through it the cache), so a host that
    reuses one AppState reuses cached prices and balances across commands.
    Passed explicitly to avoid global state and enable testing.
    """

    settings: CoinwagonSettings
    logger: logging.Logger
    engine: ResolutionEngine

    @classmethod
    def from_settings(
        cls, settings: CoinwagonSettings, logger: logging.Logger | None = None
    ) -> AppState:
        return cls(
            settings=settings,
            logger=logger or logging.getLogger("coinwagon"),
            engine=build_resolution_engine(settings),
        )
