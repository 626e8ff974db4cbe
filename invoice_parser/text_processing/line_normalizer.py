"""
Line Normalizer Module.

Splits OCR output into an ordered list of trimmed, non-empty lines.
Whitespace runs inside a line collapse to a single space, so every
later regex can assume single spacing.
"""

from typing import List, Optional


def normalize_lines(text: Optional[str]) -> List[str]:
    """
    Split OCR text into normalized lines.

    Args:
        text: Raw OCR text blob.

    Returns:
        Ordered list of non-empty lines. Empty for None or blank input.

    Example:
        >>> normalize_lines("  Factuur \\n\\n Totaal   € 121,00 ")
        ['Factuur', 'Totaal € 121,00']
    """
    if not text:
        return []

    lines = []
    for raw_line in text.splitlines():
        line = ' '.join(raw_line.split())
        if line:
            lines.append(line)
    return lines


def join_lines(lines: List[str]) -> str:
    """Rebuild the normalized full text used for whole-document searches."""
    return '\n'.join(lines)
