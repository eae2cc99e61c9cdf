"""Cryptocurrency prices and address balances with cached provider fallback."""

from __future__ import annotations

from .commands import Coinwagon, Command, parse_command, run_command
from .errors import (
    AllProvidersFailedError,
    CoinwagonError,
    CommandTimeoutError,
    FailureCause,
    InputError,
    InvalidArgumentsError,
    InvalidQueryError,
    ResolutionError,
    WalletFileError,
)

__version__ = "0.1.0"

__all__ = [
    "AllProvidersFailedError",
    "Coinwagon",
    "CoinwagonError",
    "Command",
    "CommandTimeoutError",
    "FailureCause",
    "InputError",
    "InvalidArgumentsError",
    "InvalidQueryError",
    "ResolutionError",
    "WalletFileError",
    "__version__",
    "parse_command",
    "run_command",
]
