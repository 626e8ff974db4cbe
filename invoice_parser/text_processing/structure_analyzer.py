"""
Structure Analyzer Module.

This module tags every normalized line with the semantic sections it
belongs to. Tagging is non-exclusive: one line may sit in several
sections at once (a "Totaal incl. btw € 121,00" line is both a totals
and a line-items candidate when it carries a percentage).

Sections:
    - header: first 20% of the document (by line index)
    - vendor: legal-entity suffixes, contact details, VAT/KvK labels
    - customer: customer number and billing labels
    - invoice_meta: invoice number/date labels, id-like tokens, dates
    - line_items: column labels, amount together with a percentage
    - totals: totals labels, tax-rate labels, currency amounts
    - payment: payment instructions, bank labels, IBAN-shaped tokens

Author: ML Engineering Team
"""

import re
from typing import Dict, Iterable, List, Optional, Tuple

from config import get_config
from invoice_parser.utils.logger import get_logger

logger = get_logger(__name__)

SECTIONS = (
    'header', 'vendor', 'customer', 'invoice_meta',
    'line_items', 'totals', 'payment'
)

IBAN_SHAPE = r'\b[A-Z]{2}\d{2}[A-Z0-9]{4}\d{7}[A-Z0-9]{0,16}\b'

SECTION_PATTERNS = {
    'vendor': [
        r'\b(?:b\.?v|n\.?v|ltd|inc|corp|gmbh|llc)\b',
        r'@',
        r'www\.',
        r'btw\s*nummer|vat\s*number|kvk',
        r'telefoon|phone|tel:',
    ],
    'customer': [
        r'klantnummer|klant\s*nr|customer\s*(?:number|nr|no)\b|client|bill\s*to',
        r'factuur\s*aan|invoice\s*to|t\.a\.v\.',
    ],
    'invoice_meta': [
        r'factuurnummer|invoice\s*number|factuur\s*datum|invoice\s*date',
        r'vervaldatum|due\s*date',
        r'\b\d{6}\b|\b\d{4}-\d+\b',
        r'\b\d{1,2}[-/.]\d{1,2}[-/.]\d{4}\b',
    ],
    'line_items': [
        r'omschrijving|description|artikel|product',
        r'hoeveelheid|quantity|aantal|prijs|price',
    ],
    'totals': [
        r'totaal.*excl|subtotal|subtotaal',
        r'(?:btw|vat)\s*\d+\s*%',
        r'totaal.*incl|total.*incl|totaalbedrag|te\s*betalen|amount\s*due',
    ],
    'payment': [
        r'verzoeken.*betalen|pay.*within|binnen.*dagen|betaaltermijn|payment\s*terms',
        r'bankrekening|iban|bic|account',
    ],
}

_DECIMAL_RE = re.compile(r'\d+[.,]\d{2}')
_PERCENT_RE = re.compile(r'\d+\s*%')
_CURRENCY_RE = re.compile(r'[€$£]')
_IBAN_RE = re.compile(IBAN_SHAPE)


class DocumentStructure:
    """
    Read-only section membership of a document.

    Each section holds ascending, unique line indices.

    Example:
        >>> structure = StructureAnalyzer().analyze(lines)
        >>> structure.indices("invoice_meta", "header")
        [0, 1, 2, 4]
        >>> structure.first("line_items")
        7
    """

    def __init__(self, sections: Dict[str, Iterable[int]], line_count: int) -> None:
        self._sections = {
            name: tuple(sorted(set(sections.get(name, ()))))
            for name in SECTIONS
        }
        self.line_count = line_count

    def indices(self, *sections: str) -> List[int]:
        """
        Get the sorted union of line indices of one or more sections.

        Args:
            sections: Section names.

        Returns:
            Ascending list of unique line indices.
        """
        merged = set()
        for name in sections:
            merged.update(self._sections[name])
        return sorted(merged)

    def first(self, section: str) -> Optional[int]:
        """First line index of a section, or None when it is empty."""
        members = self._sections[section]
        return members[0] if members else None

    def last(self, section: str) -> Optional[int]:
        """Last line index of a section, or None when it is empty."""
        members = self._sections[section]
        return members[-1] if members else None

    def contains(self, section: str, index: int) -> bool:
        return index in self._sections[section]

    def as_dict(self) -> Dict[str, Tuple[int, ...]]:
        return dict(self._sections)

    def __repr__(self) -> str:
        counts = ', '.join(f"{k}={len(v)}" for k, v in self._sections.items())
        return f"DocumentStructure(lines={self.line_count}, {counts})"


class StructureAnalyzer:
    """
    Assigns normalized lines to semantic sections.

    Attributes:
        header_ratio: Fraction of the document treated as header.

    Example:
        >>> analyzer = StructureAnalyzer()
        >>> structure = analyzer.analyze(["Acme B.V.", "Factuurnummer: F2024-0091"])
        >>> structure.contains("vendor", 0)
        True
    """

    def __init__(self, header_ratio: Optional[float] = None) -> None:
        """
        Initialize the analyzer.

        Args:
            header_ratio: Header fraction. If None, uses config.
        """
        self.header_ratio = header_ratio if header_ratio is not None else get_config(
            "structure.header_ratio", 0.2
        )
        self._patterns = {
            name: [re.compile(p, re.IGNORECASE) for p in patterns]
            for name, patterns in SECTION_PATTERNS.items()
        }

    def analyze(self, lines: List[str]) -> DocumentStructure:
        """
        Build section membership for a list of normalized lines.

        Args:
            lines: Output of normalize_lines().

        Returns:
            DocumentStructure. All sections are empty for an empty document.
        """
        sections: Dict[str, List[int]] = {name: [] for name in SECTIONS}
        header_limit = len(lines) * self.header_ratio

        for i, line in enumerate(lines):
            if i < header_limit:
                sections['header'].append(i)

            for name in self.line_sections(line):
                sections[name].append(i)

        structure = DocumentStructure(sections, len(lines))
        logger.debug(f"Structure analyzed: {structure}")
        return structure

    def line_sections(self, line: str) -> List[str]:
        """
        Get the content-based sections a single line belongs to.

        The position-based header section is not included.
        """
        matched = [
            name for name, patterns in self._patterns.items()
            if any(p.search(line) for p in patterns)
        ]

        has_decimal = bool(_DECIMAL_RE.search(line))

        if 'line_items' not in matched and has_decimal and _PERCENT_RE.search(line):
            matched.append('line_items')

        if 'totals' not in matched and has_decimal and _CURRENCY_RE.search(line):
            matched.append('totals')

        if 'payment' not in matched and _IBAN_RE.search(line):
            matched.append('payment')

        return matched
