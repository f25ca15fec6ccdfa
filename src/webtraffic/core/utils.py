"""Small formatting helpers."""

from __future__ import annotations

BYTE_UNIT = 1000
BYTE_PREFIXES = "KMGTPE"


def human_bytes(size: int) -> str:
    """Formats ``size`` with base-1000 units, e.g. ``1.5 KB``."""

    if size < BYTE_UNIT:
        return f"{size} B"

    divisor, exponent = BYTE_UNIT, 0
    remaining = size // BYTE_UNIT
    while remaining >= BYTE_UNIT and exponent < len(BYTE_PREFIXES) - 1:
        divisor *= BYTE_UNIT
        exponent += 1
        remaining //= BYTE_UNIT
    return f"{size / divisor:.1f} {BYTE_PREFIXES[exponent]}B"
