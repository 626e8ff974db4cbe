"""
Address Parser.

Recovers a Dutch-style postal address (street + house number,
"1015 CJ Amsterdam", country) from a handful of lines. Shared by the
vendor and customer extractors.
"""

import re
from typing import Iterable, List, Optional

from invoice_parser.models import AddressInfo
from invoice_parser.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_STREET_SUFFIXES = [
    'straat', 'weg', 'laan', 'gracht', 'plein', 'kade', 'singel', 'dijk',
    'street', 'road', 'avenue', 'lane'
]

DEFAULT_COUNTRIES = [
    'Nederland', 'Netherlands', 'The Netherlands', 'Belgie', 'Belgium',
    'Germany', 'Deutschland', 'United Kingdom'
]

# Postal code followed by a capitalized or all-caps city name
POSTAL_CITY = re.compile(
    r"\b(\d{4})\s?([A-Z]{2})\b\s+"
    r"([A-Z][a-z][A-Za-z\-' ]*[a-z]|[A-Z][A-Z\-' ]*[A-Z])"
)


class AddressParser:
    """
    Parses address parts from candidate lines.

    Example:
        >>> parser = AddressParser()
        >>> address = parser.parse(["Keizersgracht 123", "1015 CJ Amsterdam"])
        >>> address.postal_code, address.city, address.house_number
        ('1015 CJ', 'Amsterdam', '123')
    """

    def __init__(
        self,
        street_suffixes: Optional[Iterable[str]] = None,
        countries: Optional[Iterable[str]] = None
    ) -> None:
        suffixes = list(street_suffixes or DEFAULT_STREET_SUFFIXES)
        countries = sorted(countries or DEFAULT_COUNTRIES, key=len, reverse=True)

        suffix_alt = '|'.join(re.escape(s) for s in suffixes)
        self.street_pattern = re.compile(
            rf"(?<!\w)(?P<street>[A-Za-z][A-Za-z.'\- ]*?(?:{suffix_alt})\.?)\s+"
            r"(?P<number>\d+(?:\s?[A-Za-z](?![A-Za-z]))?(?:[-/]\d+[A-Za-z]?)?)",
            re.IGNORECASE
        )
        self.country_pattern = re.compile(
            r'\b(' + '|'.join(re.escape(c) for c in countries) + r')\b',
            re.IGNORECASE
        )
        self._canonical_countries = {c.lower(): c for c in countries}

    def parse(self, lines: List[str]) -> AddressInfo:
        """
        Parse an address from lines; the first match of each part wins.

        Args:
            lines: Candidate lines in document order.

        Returns:
            AddressInfo, empty when nothing was recognized.
        """
        address = AddressInfo()

        for line in lines:
            if address.postal_code is None:
                match = POSTAL_CITY.search(line)
                if match:
                    address.postal_code = f"{match.group(1)} {match.group(2)}"
                    address.city = match.group(3).strip()

            if address.street is None:
                match = self.street_pattern.search(line)
                if match:
                    address.street = match.group('street').strip()
                    address.house_number = match.group('number').replace(' ', '')

            if address.country is None:
                match = self.country_pattern.search(line)
                if match:
                    address.country = self._canonical_countries[match.group(1).lower()]

        address.full_address = self._format_full(address)
        if not address.is_empty():
            logger.debug(f"Address parsed: {address.full_address}")
        return address

    @staticmethod
    def _format_full(address: AddressInfo) -> Optional[str]:
        parts = []
        if address.street:
            parts.append(' '.join(p for p in (address.street, address.house_number) if p))
        if address.postal_code:
            parts.append(' '.join(p for p in (address.postal_code, address.city) if p))
        if address.country:
            parts.append(address.country)
        return ', '.join(parts) or None
