"""Compact human-readable numbers for narrative prompts (1.8k, 27k, 1.5M)."""

from __future__ import annotations


def format_number(n: int) -> str:
    """Format a counter the way it is read aloud.

    >>> format_number(950)
    '950'
    >>> format_number(1800)
    '1.8k'
    >>> format_number(27022)
    '27k'
    >>> format_number(1_500_000)
    '1.5M'
    """
    if n < 1000:
        return str(n)

    thousands = n / 1000.0
    if n < 10_000:
        if thousands == int(thousands):
            return f"{thousands:.0f}k"
        return f"{thousands:.1f}k"

    if n < 1_000_000:
        if thousands == int(thousands):
            return f"{thousands:.0f}k"
        rounded = int(thousands * 10 + 0.5) / 10.0
        if rounded == int(rounded):
            return f"{rounded:.0f}k"
        return f"{rounded:.1f}k"

    millions = n / 1_000_000.0
    if millions == int(millions):
        return f"{millions:.0f}M"
    return f"{millions:.1f}M"
