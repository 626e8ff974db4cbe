"""
Locale Detector.

Sets the record language from keyword sets (primary locale checked
first) and the currency from an ordered symbol/code table.
"""

import re
from typing import Dict, Iterable, List, Optional

from config import get_config
from invoice_parser.models import InvoiceRecord
from invoice_parser.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PRIMARY = {'name': 'Dutch', 'keywords': ['factuur', 'btw', 'totaal', 'klant', 'betaling']}
DEFAULT_SECONDARY = {'name': 'English', 'keywords': ['invoice', 'vat', 'total', 'customer', 'payment']}
DEFAULT_CURRENCIES = [
    {'code': 'EUR', 'symbols': ['€']},
    {'code': 'USD', 'symbols': ['$']},
    {'code': 'GBP', 'symbols': ['£']},
]


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern:
    return re.compile(r'\b(?:' + '|'.join(re.escape(k) for k in keywords) + r')', re.IGNORECASE)


class LocaleDetector:
    """
    Detects document language and currency.

    Example:
        >>> detector = LocaleDetector()
        >>> detector.detect_language("Factuur 2024")
        'Dutch'
        >>> detector.detect_currency("Total $ 10.00")
        'USD'
    """

    def __init__(
        self,
        primary: Optional[Dict] = None,
        secondary: Optional[Dict] = None,
        currencies: Optional[List[Dict]] = None
    ) -> None:
        primary = primary or get_config("locale.primary", DEFAULT_PRIMARY)
        secondary = secondary or get_config("locale.secondary", DEFAULT_SECONDARY)

        self.languages = [
            (primary['name'], _keyword_pattern(primary['keywords'])),
            (secondary['name'], _keyword_pattern(secondary['keywords'])),
        ]

        self.currencies = []
        for entry in currencies or get_config("locale.currencies", DEFAULT_CURRENCIES):
            markers = [re.escape(s) for s in entry.get('symbols', [])]
            markers.append(rf"\b{re.escape(entry['code'])}\b")
            self.currencies.append((entry['code'], re.compile('|'.join(markers))))

    def detect_language(self, text: str) -> Optional[str]:
        for name, pattern in self.languages:
            if pattern.search(text):
                return name
        return None

    def detect_currency(self, text: str) -> Optional[str]:
        for code, pattern in self.currencies:
            if pattern.search(text):
                return code
        return None

    def extract(self, record: InvoiceRecord, text: str) -> None:
        """Set record.language and record.currency."""
        record.language = self.detect_language(text)
        record.currency = self.detect_currency(text)
        logger.debug(f"Locale: language={record.language}, currency={record.currency}")
