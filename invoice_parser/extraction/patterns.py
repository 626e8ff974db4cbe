"""
Shared Extraction Patterns.

Field extraction is expressed as ordered lists of PatternRule objects
(regex + validator). Rules are evaluated in list order and the first
accepted capture wins, so the precedence between alternative
patterns is visible in one place.

Also holds the regex fragments shared by several extractors (dates,
IBAN, bank accounts).
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Pattern, Tuple

from invoice_parser.utils.logger import get_logger

logger = get_logger(__name__)

MONTH_NAMES = (
    r'januari|februari|maart|april|mei|juni|juli|augustus|september|oktober|november|december'
    r'|january|february|march|may|june|july|august|october'
    r'|jan|feb|mrt|mar|apr|jun|jul|aug|sep|sept|okt|oct|nov|dec'
)

# 15-03-2024 | 15/03/2024 | 15.03.2024 | 3 maart 2024
DATE_VALUE = (
    r'\d{1,2}[-/.]\d{1,2}[-/.]\d{4}'
    rf'|\d{{1,2}}\s+(?:{MONTH_NAMES})\.?\s+\d{{4}}'
)

IBAN_COMPACT = r'\b([A-Z]{2}\d{2}[A-Z0-9]{4}\d{7}[A-Z0-9]{0,16})\b'
IBAN_SPACED = r'\b([A-Z]{2}\d{2}(?: ?[A-Z0-9]{4}){3,7}(?: ?[A-Z0-9]{1,3})?)\b'

# Label followed by an identifier-like code
CODE_VALUE = r'([A-Z0-9][A-Z0-9\-_/.]*[A-Z0-9]|[A-Z0-9])'


def _accept_any(value: str) -> bool:
    return bool(value)


@dataclass(frozen=True)
class PatternRule:
    """
    One extraction pattern with its validator.

    Attributes:
        name: Short label used in debug logs.
        pattern: Compiled regex; group 1 (or the first non-empty group)
            is the candidate value.
        validator: Predicate deciding whether a candidate is accepted.
    """
    name: str
    pattern: Pattern
    validator: Callable[[str], bool] = field(default=_accept_any)

    @classmethod
    def build(
        cls,
        name: str,
        pattern: str,
        validator: Callable[[str], bool] = _accept_any,
        flags: int = re.IGNORECASE
    ) -> 'PatternRule':
        return cls(name, re.compile(pattern, flags), validator)

    def apply(self, text: str) -> Optional[str]:
        """
        Apply the rule to a piece of text.

        Returns:
            The accepted candidate, or None when the pattern does not
            match or the validator rejects the capture.
        """
        match = self.pattern.search(text)
        if not match:
            return None

        groups = [g for g in match.groups() if g]
        candidate = (groups[0] if groups else match.group(0)).strip()

        if not self.validator(candidate):
            logger.debug(f"Rule '{self.name}' rejected candidate '{candidate}'")
            return None
        return candidate


def first_match(rules: Iterable[PatternRule], text: str) -> Optional[Tuple[str, str]]:
    """
    Evaluate rules in order against one piece of text.

    Args:
        rules: Ordered pattern rules.
        text: Text to search.

    Returns:
        Tuple of (rule name, accepted value) or None.
    """
    for rule in rules:
        value = rule.apply(text)
        if value is not None:
            return rule.name, value
    return None


def first_match_in_lines(
    rules: Iterable[PatternRule],
    lines: List[str],
    indices: Iterable[int]
) -> Optional[Tuple[str, str]]:
    """
    Evaluate rules line by line, in the given index order.

    For each line every rule is tried before moving to the next line.
    """
    rules = list(rules)
    for index in indices:
        if 0 <= index < len(lines):
            found = first_match(rules, lines[index])
            if found:
                return found
    return None


_IBAN_COMPACT_RE = re.compile(IBAN_COMPACT)
_IBAN_SPACED_RE = re.compile(IBAN_SPACED)


def find_iban(text: str) -> Optional[str]:
    """
    Find the first IBAN-shaped token in text.

    The compact form is searched first; a spaced form
    ("NL91 ABNA 0417 1643 00") is accepted with its spaces removed.
    Only the shape is checked, not the checksum.

    Example:
        >>> find_iban("IBAN: NL91 ABNA 0417 1643 00")
        'NL91ABNA0417164300'
    """
    if not text:
        return None

    match = _IBAN_COMPACT_RE.search(text)
    if match:
        return match.group(1)

    for match in _IBAN_SPACED_RE.finditer(text):
        candidate = re.sub(r'\s+', '', match.group(1))
        if _IBAN_COMPACT_RE.fullmatch(candidate):
            return candidate
    return None


# Account number after a bank label; labels are case-insensitive, values are not
BANK_ACCOUNT = (
    r'(?i:bankrekening(?:nummer)?|rekeningnummer|rekening\s*nr|account\s*number|bank\s*account)'
    r'\.?\s*[:\-]?\s*'
    r'([A-Z]{2}\d{2}[A-Z0-9 ]{10,30}[A-Z0-9]|\d[\d .]{5,}\d)'
)


def bank_account_rule() -> PatternRule:
    """Rule recognizing a labeled bank account number."""
    return PatternRule.build('bank account', BANK_ACCOUNT, flags=0)
