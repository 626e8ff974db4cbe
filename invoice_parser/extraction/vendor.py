"""
Vendor Extractor.

Extracts the issuing company: name (scored candidate), contact
details, VAT and chamber-of-commerce numbers, IBAN, bank account
and postal address.

Author: ML Engineering Team
"""

import re
from typing import Iterable, List, Optional

from config import get_config
from invoice_parser.models import InvoiceRecord
from invoice_parser.text_processing import DocumentStructure
from invoice_parser.utils.logger import get_logger
from .address import AddressParser, DEFAULT_COUNTRIES, DEFAULT_STREET_SUFFIXES
from .patterns import PatternRule, bank_account_rule, find_iban, first_match
from .scoring import DEFAULT_LEGAL_SUFFIXES, best_candidate, build_suffix_pattern, score_candidate

logger = get_logger(__name__)

# Leading/trailing OCR debris around a company name
STRAY_SYMBOLS = re.compile(r"^[^\w(]+|[^\w.)]+$")


def normalize_vat(value: str) -> str:
    return re.sub(r'[\s.]', '', value).upper()


VENDOR_RULES = {
    'email': [
        PatternRule.build('email', r'\b([A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,})\b'),
    ],
    'phone': [
        PatternRule.build(
            'phone',
            r'\b(?:tel|telefoon|phone|telephone)\.?\s*[:\-]?\s*(\+?[\d \-()]{8,}\d)',
            lambda v: sum(ch.isdigit() for ch in v) >= 8
        ),
    ],
    'website': [
        PatternRule.build(
            'website',
            r'((?:https?://)?www\.[A-Za-z0-9\-]+(?:\.[A-Za-z0-9\-]+)*\.[A-Za-z]{2,}'
            r'|https?://[A-Za-z0-9\-]+(?:\.[A-Za-z0-9\-]+)*\.[A-Za-z]{2,})'
        ),
    ],
    'vat_number': [
        PatternRule.build(
            'vat number',
            r'(?:btw[\s\-]*(?:nummer|nr|id)?|vat[\s\-]*(?:number|nr|no|id|reg(?:istration)?)?)'
            r'\.?\s*[:\-]?\s*([A-Z]{2}\s?\d{6,}[A-Z0-9]*)'
        ),
    ],
    'registration_number': [
        PatternRule.build(
            'kvk',
            r'(?:kvk|k\.v\.k\.|kamer\s*van\s*koophandel|coc|chamber\s*of\s*commerce)'
            r'(?:[\s\-]*(?:nummer|nr|number|no))?\.?\s*[:\-]?\s*(\d{7,9})\b'
        ),
    ],
    'contact_person': [
        PatternRule.build(
            'contact person',
            r"(?i:contactpersoon|contact *person) *[:\-]? *"
            r"([A-Z][a-z]+(?: +(?:van|de|der|den|ter|[A-Z][a-z'\-]+)){0,4})",
            flags=0
        ),
    ],
}


class VendorExtractor:
    """
    Extracts vendor information from header and vendor-section lines.

    Attributes:
        max_candidates: Number of header/vendor lines scored as names.
        address_parser: Parser used for the vendor address.

    Example:
        >>> VendorExtractor().extract(record, lines, structure, text)
        >>> record.vendor.company_name
        'Acme Solutions B.V.'
    """

    def __init__(
        self,
        max_candidates: Optional[int] = None,
        legal_suffixes: Optional[Iterable[str]] = None,
        street_suffixes: Optional[Iterable[str]] = None,
        countries: Optional[Iterable[str]] = None
    ) -> None:
        self.max_candidates = max_candidates or get_config("vendor.max_candidates", 10)
        self.legal_suffix_pattern = build_suffix_pattern(
            legal_suffixes or get_config("vendor.legal_suffixes", DEFAULT_LEGAL_SUFFIXES)
        )
        self.address_parser = AddressParser(
            street_suffixes or get_config("vendor.street_suffixes", DEFAULT_STREET_SUFFIXES),
            countries or get_config("vendor.countries", DEFAULT_COUNTRIES)
        )
        self.bank_account_rules = [bank_account_rule()]

    def extract(
        self,
        record: InvoiceRecord,
        lines: List[str],
        structure: DocumentStructure,
        text: str
    ) -> None:
        """
        Fill record.vendor in place.

        Args:
            record: Record being built.
            lines: Normalized lines.
            structure: Section membership of the lines.
            text: Normalized full text.
        """
        vendor = record.vendor
        vendor_indices = structure.indices("header", "vendor")
        candidate_lines = [lines[i] for i in vendor_indices[:self.max_candidates]]
        vendor_text = '\n'.join(lines[i] for i in vendor_indices)

        vendor.company_name = self.extract_company_name(candidate_lines)

        for field_name, rules in VENDOR_RULES.items():
            found = first_match(rules, vendor_text)
            if found:
                setattr(vendor, field_name, found[1])
                logger.debug(f"Vendor {field_name}: {found[1]}")

        if vendor.vat_number:
            vendor.vat_number = normalize_vat(vendor.vat_number)

        vendor.iban = find_iban(text)

        found = first_match(self.bank_account_rules, text)
        if found:
            vendor.bank_account = found[1]

        vendor.address = self.address_parser.parse(candidate_lines)

    def extract_company_name(self, candidates: List[str]) -> Optional[str]:
        """
        Pick the best scoring company-name candidate.

        Args:
            candidates: Candidate lines in document order.

        Returns:
            Cleaned company name or None.
        """
        best = best_candidate(
            candidates,
            lambda line, position: score_candidate(line, position, self.legal_suffix_pattern)
        )
        if best is None:
            return None

        name, score = best
        cleaned = STRAY_SYMBOLS.sub('', name.strip()).strip()
        logger.debug(f"Vendor name candidate '{cleaned}' (score {score})")
        return cleaned or None
