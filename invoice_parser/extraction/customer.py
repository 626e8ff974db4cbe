"""
Customer Extractor.

Extracts the billed party. The company name uses a positional window
between the vendor block and the line-items block; when that window
yields nothing, a second pass walks the whole document starting after
a vendor contact marker.

Author: ML Engineering Team
"""

import re
from typing import Iterable, List, Optional

from config import get_config
from invoice_parser.models import InvoiceRecord
from invoice_parser.text_processing import DocumentStructure
from invoice_parser.utils.logger import get_logger
from .address import AddressParser, DEFAULT_COUNTRIES, DEFAULT_STREET_SUFFIXES
from .patterns import PatternRule, first_match, first_match_in_lines
from .vendor import VENDOR_RULES, normalize_vat

logger = get_logger(__name__)

DEFAULT_NOISE_TOKENS = [
    'nederland', 'netherlands', 'amsterdam', 'utrecht', 'rotterdam', 'den haag',
    'eindhoven', 'telefoon', 'phone', 'email', 'website'
]

METADATA_KEYWORDS = re.compile(
    r'factuur|invoice|datum|date|nummer|number|prijs|price|totaal|total|omschrijving|description'
    r'|korting|discount',
    re.IGNORECASE
)
VENDOR_MARKER = re.compile(r'btw\s*nummer|vat\s*number|@|nederland', re.IGNORECASE)
PRICING_KEYWORDS = re.compile(
    r'omschrijving|description|periode|prijs|price|aantal|quantity|bedrag|amount|totaal|total',
    re.IGNORECASE
)

WINDOW_NAME_SHAPE = re.compile(r'^[A-Z][A-Za-z\s&.\-]{5,}$')
FALLBACK_NAME_SHAPE = re.compile(r'^[A-Z][A-Za-z\s&.\-]{6,40}$')
POSTAL_CODE = re.compile(r'\d{4}\s?[A-Z]{2}\b')

ADDRESS_LOOKAHEAD = 3

CUSTOMER_NUMBER_RULES = [
    PatternRule.build(
        'customer number',
        r'(?:klantnummer|klant\s*nr|customer\s*(?:number|nr|no))\.?\s*[:\-]?\s*([A-Z0-9][A-Z0-9\-]*)',
        lambda v: len(v) > 1
    ),
]

CONTACT_RULES = [
    PatternRule.build(
        'attention',
        r"(?i:\bt\.?\s?a\.?\s?v\.?|\battn\.?|\battention)\s*[:\-]?\s*"
        r"((?:(?i:dhr|mevr|mr|mrs|ms)\.? )?[A-Z][a-z]+(?: +(?:van|de|der|den|ter|[A-Z][a-z'\-]+)){0,4})",
        flags=0
    ),
]


class CustomerExtractor:
    """
    Extracts customer number, name, address, VAT number and contact.

    Example:
        >>> CustomerExtractor().extract(record, lines, structure, text)
        >>> record.customer.customer_number
        'K-1042'
    """

    def __init__(
        self,
        noise_tokens: Optional[Iterable[str]] = None,
        default_window_start: Optional[int] = None,
        street_suffixes: Optional[Iterable[str]] = None,
        countries: Optional[Iterable[str]] = None
    ) -> None:
        tokens = noise_tokens or get_config("customer.noise_tokens", DEFAULT_NOISE_TOKENS)
        self.noise_pattern = re.compile(
            '|'.join(re.escape(t).replace(r'\ ', r'\s*') for t in tokens),
            re.IGNORECASE
        )
        self.default_window_start = (
            default_window_start if default_window_start is not None
            else get_config("customer.default_window_start", 5)
        )
        self.address_parser = AddressParser(
            street_suffixes or get_config("vendor.street_suffixes", DEFAULT_STREET_SUFFIXES),
            countries or get_config("vendor.countries", DEFAULT_COUNTRIES)
        )

    def extract(
        self,
        record: InvoiceRecord,
        lines: List[str],
        structure: DocumentStructure,
        text: str
    ) -> None:
        """
        Fill record.customer in place.

        Args:
            record: Record being built (vendor already extracted).
            lines: Normalized lines.
            structure: Section membership of the lines.
            text: Normalized full text.
        """
        customer = record.customer
        vendor_name = record.vendor.company_name

        found = first_match_in_lines(
            CUSTOMER_NUMBER_RULES, lines, structure.indices("customer", "invoice_meta")
        )
        if found:
            customer.customer_number = found[1]
            logger.debug(f"Customer number: {found[1]}")

        name_index = self._find_in_window(lines, structure, vendor_name)
        if name_index is None:
            name_index = self._find_after_vendor_marker(lines, vendor_name)

        following = []
        if name_index is not None:
            customer.company_name = lines[name_index]
            logger.debug(f"Customer name at line {name_index}: {customer.company_name}")
            following = lines[name_index + 1:name_index + 1 + ADDRESS_LOOKAHEAD]
            customer.address = self.address_parser.parse(following)

        customer_lines = [lines[i] for i in structure.indices("customer")] + following
        customer.vat_number = self._find_vat_number(customer_lines, record.vendor.vat_number)

        found = first_match(CONTACT_RULES, text)
        if found:
            customer.contact_person = found[1]

    def _is_noise(self, line: str) -> bool:
        return bool(self.noise_pattern.search(line))

    def window(self, lines: List[str], structure: DocumentStructure) -> range:
        """
        Line range between the vendor block and the line-items block.

        Returns:
            Range of line indices, possibly empty.
        """
        last_vendor = structure.last("vendor")
        first_items = structure.first("line_items")

        start = last_vendor + 1 if last_vendor is not None else self.default_window_start
        end = first_items - 1 if first_items is not None else len(lines) // 2
        return range(start, min(end, len(lines) - 1) + 1)

    def _find_in_window(
        self,
        lines: List[str],
        structure: DocumentStructure,
        vendor_name: Optional[str]
    ) -> Optional[int]:
        for i in self.window(lines, structure):
            line = lines[i]
            if METADATA_KEYWORDS.search(line):
                continue
            if WINDOW_NAME_SHAPE.match(line) and not self._is_noise(line) and line != vendor_name:
                return i
        return None

    def _find_after_vendor_marker(self, lines: List[str], vendor_name: Optional[str]) -> Optional[int]:
        after_marker = False

        for i, line in enumerate(lines):
            if PRICING_KEYWORDS.search(line):
                break

            if VENDOR_MARKER.search(line):
                after_marker = True
                continue

            if not after_marker:
                continue

            if (FALLBACK_NAME_SHAPE.match(line)
                    and not METADATA_KEYWORDS.search(line)
                    and not self._is_noise(line)
                    and not POSTAL_CODE.search(line)
                    and '€' not in line
                    and line != vendor_name):
                return i
        return None

    def _find_vat_number(self, customer_lines: List[str], vendor_vat: Optional[str]) -> Optional[str]:
        for line in customer_lines:
            found = first_match(VENDOR_RULES['vat_number'], line)
            if found:
                vat = normalize_vat(found[1])
                if vat != vendor_vat:
                    return vat
        return None
