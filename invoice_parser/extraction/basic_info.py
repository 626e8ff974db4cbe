"""
Basic Invoice Info Extractor.

Extracts the invoice header fields:
    - invoice_number, invoice_date (line by line over meta + header lines)
    - due_date, order_number, reference, notes (over the full text)

Each field is driven by an ordered PatternRule list; the first value
accepted by a rule's validator wins.

Author: ML Engineering Team
"""

import re
from typing import Iterable, List, Optional

from config import get_config
from invoice_parser.models import InvoiceRecord
from invoice_parser.text_processing import DocumentStructure
from invoice_parser.utils.logger import get_logger
from .patterns import CODE_VALUE, DATE_VALUE, PatternRule, first_match, first_match_in_lines

logger = get_logger(__name__)

DEFAULT_LABEL_WORDS = [
    'factuurnummer', 'factuurdatum', 'factuur', 'invoicenumber', 'invoice',
    'number', 'nummer', 'datum', 'date'
]

INVOICE_CODE = r'([A-Z0-9][A-Z0-9\-_/]*)'


def _has_digit(value: str) -> bool:
    return any(ch.isdigit() for ch in value)


class BasicInfoExtractor:
    """
    Extracts invoice number, dates and reference fields.

    Attributes:
        min_length: Minimum accepted invoice-number length.
        label_words: Words rejected as invoice-number values.

    Example:
        >>> extractor = BasicInfoExtractor()
        >>> extractor.extract(record, lines, structure, text)
        >>> record.invoice_number
        'F2024-0091'
    """

    def __init__(
        self,
        min_length: Optional[int] = None,
        label_words: Optional[Iterable[str]] = None
    ) -> None:
        self.min_length = min_length or get_config("basic_info.min_length", 3)
        words = label_words if label_words is not None else get_config(
            "basic_info.label_words", DEFAULT_LABEL_WORDS
        )
        self.label_words = {w.lower() for w in words}

        self.invoice_number_rules = [
            PatternRule.build(
                'factuurnummer',
                rf'factuurnummer\s*[:\-]?\s*{INVOICE_CODE}',
                self._valid_invoice_number
            ),
            PatternRule.build(
                'invoice number',
                rf'invoice\s*(?:number|nr|no)\.?\s*[:#\-]?\s*{INVOICE_CODE}',
                self._valid_invoice_number
            ),
            PatternRule.build(
                'factuur nr',
                rf'factuur\s*[:\-]?\s*nr\.?\s*[:\-]?\s*{INVOICE_CODE}',
                self._valid_invoice_number
            ),
            PatternRule.build('six digits', r'^(\d{6})$', self._valid_invoice_number),
            PatternRule.build(
                'standalone code',
                r'^([A-Z]{1,3}\d{4,}(?:-\d+)?|[A-Z]\d{4}-\d+|\d{4}-\d+)$',
                self._valid_invoice_number
            ),
        ]

        self.invoice_date_rules = [
            PatternRule.build('factuurdatum', rf'factuur\s*datum\s*[:\-]?\s*({DATE_VALUE})'),
            PatternRule.build('invoice date', rf'invoice\s*date\s*[:\-]?\s*({DATE_VALUE})'),
            PatternRule.build(
                'date label',
                rf'(?<!verval)(?<!due\s)\b(?:datum|date)\s*[:\-]?\s*({DATE_VALUE})'
            ),
            PatternRule.build('standalone date', rf'^({DATE_VALUE})$'),
        ]

        self.due_date_rules = [
            PatternRule.build('due date', rf'(?:vervaldatum|due\s*date)\s*[:\-]?\s*({DATE_VALUE})'),
        ]

        self.order_number_rules = [
            PatternRule.build(
                'order number',
                rf'\b(?:order|bestel)\s*(?:nummer|number|nr|no)\.?\s*[:#\-]?\s*{CODE_VALUE}',
                _has_digit
            ),
        ]

        self.reference_rules = [
            PatternRule.build(
                'reference',
                r'(?<!payment\s)\b(?:referentie|reference|uw\s*kenmerk|your\s*ref(?:erence)?)'
                rf'\.?\s*[:\-]?\s*{CODE_VALUE}',
                _has_digit
            ),
        ]

        self.notes_rules = [
            PatternRule.build(
                'notes',
                r'^(?:opmerkingen|opmerking|notes?)\s*:\s*(.+)$',
                flags=re.IGNORECASE | re.MULTILINE
            ),
        ]

    def _valid_invoice_number(self, value: str) -> bool:
        return len(value) >= self.min_length and value.lower() not in self.label_words

    def extract(
        self,
        record: InvoiceRecord,
        lines: List[str],
        structure: DocumentStructure,
        text: str
    ) -> None:
        """
        Fill the basic info fields of a record in place.

        Args:
            record: Record being built.
            lines: Normalized lines.
            structure: Section membership of the lines.
            text: Normalized full text.
        """
        meta_indices = structure.indices("invoice_meta", "header")

        found = first_match_in_lines(self.invoice_number_rules, lines, meta_indices)
        if found:
            record.invoice_number = found[1]
            logger.debug(f"Invoice number via '{found[0]}': {found[1]}")

        found = first_match_in_lines(self.invoice_date_rules, lines, meta_indices)
        if found:
            record.invoice_date = found[1]
            logger.debug(f"Invoice date via '{found[0]}': {found[1]}")

        record.due_date = self._search_text(self.due_date_rules, text, 'due_date')
        record.order_number = self._search_text(self.order_number_rules, text, 'order_number')
        record.reference = self._search_text(self.reference_rules, text, 'reference')
        record.notes = self._search_text(self.notes_rules, text, 'notes')

    def _search_text(self, rules: List[PatternRule], text: str, field_name: str) -> Optional[str]:
        found = first_match(rules, text)
        if not found:
            return None
        logger.debug(f"{field_name} via '{found[0]}': {found[1]}")
        return found[1]
