"""A1-style address helpers (single-letter columns, 0-based indices)."""

from __future__ import annotations

import re

MAX_COLUMNS = 26

_ADDRESS_RE = re.compile(r"^([A-Z])(\d+)$")


def column_letter(col: int) -> str:
    """0 -> ``'A'``, 25 -> ``'Z'``."""
    if not 0 <= col < MAX_COLUMNS:
        raise ValueError(f"Column index out of range: {col}")
    return chr(ord("A") + col)


def rowcol_to_a1(row: int, col: int) -> str:
    """Convert 0-based ``(row, col)`` to an address like ``'B3'``."""
    return f"{column_letter(col)}{row + 1}"


def a1_to_rowcol(ref: str) -> tuple[int, int]:
    """Convert ``'B3'`` to 0-based ``(2, 1)``.

    Only the grid-independent shape is checked here; bounds are the caller's
    business.
    """
    m = _ADDRESS_RE.match(ref)
    if not m:
        raise ValueError(f"Invalid cell address: {ref!r}")
    row = int(m.group(2)) - 1
    if row < 0:
        raise ValueError(f"Invalid cell address: {ref!r}")
    return row, ord(m.group(1)) - ord("A")
