"""
Candidate Scoring Module.

Pure scoring of company-name candidates. A score of 0 disqualifies
a line; positive scores are compared by best_candidate(), which keeps
the first candidate on ties.
"""

import re
from typing import Callable, Iterable, Optional, Pattern, Sequence, Tuple, TypeVar

T = TypeVar('T')

DEFAULT_LEGAL_SUFFIXES = [
    'B.V.', 'BV', 'N.V.', 'NV', 'V.O.F.', 'Ltd', 'Limited', 'Inc', 'Corp', 'GmbH', 'LLC'
]


def build_suffix_pattern(suffixes: Iterable[str]) -> Pattern:
    """
    Compile legal-entity suffixes into one case-insensitive regex.

    Dots inside a suffix are optional, so "B.V." also matches "BV" and "B.V".
    """
    parts = []
    for suffix in sorted(set(suffixes), key=len, reverse=True):
        core = re.escape(suffix.rstrip('.')).replace(r'\.', r'\.?')
        parts.append(core + r'\.?')
    return re.compile(rf"(?<!\w)(?:{'|'.join(parts)})(?=\W|$)", re.IGNORECASE)


LEGAL_SUFFIX = build_suffix_pattern(DEFAULT_LEGAL_SUFFIXES)

DISQUALIFYING_WORDS = re.compile(
    r'factuur|invoice|datum|date|telefoon|phone|email|e-mail|website|btw|vat',
    re.IGNORECASE
)

PROPER_CASE = re.compile(r'^[A-Z][A-Za-z\s&.\-]+$')
BARE_NUMBER = re.compile(r'^[\d\s\-+().,/]+$')
BARE_POSTAL_CODE = re.compile(r'^\d{4}\s?[A-Z]{2}$', re.IGNORECASE)
CURRENCY_SYMBOL = re.compile(r'[€$£]')
ADDRESS_LIKE = re.compile(r'\d{4}\s?[A-Z]{2}\b|\b\d+[a-z]?\s*$|straat|weg|laan|street|road', re.IGNORECASE)

MIN_LENGTH = 3


def score_candidate(line: str, position: int, legal_suffix: Pattern = LEGAL_SUFFIX) -> int:
    """
    Score a line as a company-name candidate.

    Args:
        line: Candidate text.
        position: Ordinal of the candidate in the candidate list.
        legal_suffix: Regex recognizing legal-entity suffixes.

    Returns:
        0 when disqualified, otherwise a positive score.

    Example:
        >>> score_candidate("Acme Solutions B.V.", 0)
        34
        >>> score_candidate("Factuur", 0)
        0
    """
    text = line.strip()

    if len(text) < MIN_LENGTH:
        return 0
    if DISQUALIFYING_WORDS.search(text):
        return 0
    if BARE_NUMBER.match(text) or BARE_POSTAL_CODE.match(text):
        return 0
    if CURRENCY_SYMBOL.search(text):
        return 0

    score = 0
    if legal_suffix.search(text):
        score += 15
    if 5 <= len(text) <= 40:
        score += 5
    if PROPER_CASE.match(text):
        score += 8
    if position < 5:
        score += 3
    if not ADDRESS_LIKE.search(text):
        score += 3
    return score


def best_candidate(
    candidates: Sequence[T],
    scorer: Callable[[T, int], int]
) -> Optional[Tuple[T, int]]:
    """
    Pick the highest scoring candidate.

    Args:
        candidates: Candidates in document order.
        scorer: Function of (candidate, position) returning a score.

    Returns:
        Tuple of (candidate, score) for the best candidate with a
        score above zero, or None. Ties resolve to the earliest one.
    """
    best = None
    best_score = 0
    for position, candidate in enumerate(candidates):
        score = scorer(candidate, position)
        if score > best_score:
            best, best_score = candidate, score
    if best is None:
        return None
    return best, best_score
