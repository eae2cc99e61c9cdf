"""Wallet file parsing: one ``asset,address`` pair per line."""

from __future__ import annotations

from pathlib import Path

from .domain import WalletEntry
from .errors import WalletFileError


def parse_wallet_lines(lines: list[str]) -> list[WalletEntry]:
    """Parse wallet file lines into entries, preserving order.

    Blank lines and lines starting with ``#`` are skipped.

    Raises:
        WalletFileError: If a line is not exactly two non-empty fields.
    """
    entries: list[WalletEntry] = []
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = [part.strip() for part in line.split(",")]
        if len(parts) != 2 or not all(parts):
            raise WalletFileError(
                f"Invalid wallet line {line_number}: {raw.rstrip()!r}"
            )
        entries.append(
            WalletEntry(asset=parts[0], address=parts[1], line_number=line_number)
        )
    return entries


def load_wallet_file(path: str | Path) -> list[WalletEntry]:
    """Read and parse a UTF-8 wallet file.

    Raises:
        WalletFileError: If the file is missing, unreadable, or malformed.
    """
    wallet_path = Path(path)
    try:
        text = wallet_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise WalletFileError(f"Failed to read wallet file {wallet_path}: {e}") from e
    return parse_wallet_lines(text.splitlines())
