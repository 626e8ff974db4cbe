"""
Data Normalizers Module.

This module provides normalization functions for:
    - Currency/amount tokens (decimal-comma and decimal-point notation)
    - Printed dates (numeric and Dutch/English month names)

Amount tokens are found with the shared AMOUNT_TOKEN pattern so every
extraction stage agrees on what an amount looks like.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional

from dateutil import parser as date_parser

from invoice_parser.utils.exceptions import AmountParseError
from invoice_parser.utils.logger import get_logger

logger = get_logger(__name__)

# 1.234,56 | 1,234.56 | 49,50 | 49.50
AMOUNT_TOKEN = (
    r'(?<!\d)(?<!\d[.,])'
    r'(?:\d{1,3}(?:\.\d{3})+,\d{2}|\d{1,3}(?:,\d{3})+\.\d{2}|\d{1,6}[.,]\d{2})'
    r'(?![.,]?\d)'
)

CURRENCY_MARKER = r'(?:€|\$|£|\bEUR\b|\bUSD\b|\bGBP\b)'

# Amount preceded by a currency marker; group 1 is the amount
CURRENCY_AMOUNT = rf'{CURRENCY_MARKER}\s*({AMOUNT_TOKEN})'

_AMOUNT_RE = re.compile(AMOUNT_TOKEN)
_CURRENCY_AMOUNT_RE = re.compile(CURRENCY_AMOUNT, re.IGNORECASE)

CENT = Decimal('0.01')


def round_money(value: Decimal) -> Decimal:
    """Round a Decimal to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class AmountNormalizer:
    """
    Converts amount tokens into Decimals.

    Handles currency symbols, thousand separators and the decimal-comma
    convention used on Dutch invoices (",00" = cents).

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.to_decimal("€ 1.234,56")
        Decimal('1234.56')
        >>> normalizer.to_decimal("49,50")
        Decimal('49.50')
    """

    CURRENCY_SYMBOLS = ['€', '$', '£']
    CURRENCY_CODES = ['EUR', 'USD', 'GBP']

    def parse(self, amount_str: str) -> Decimal:
        """
        Parse an amount string strictly.

        Args:
            amount_str: Amount token, optionally with currency marker.

        Returns:
            Parsed Decimal.

        Raises:
            AmountParseError: If the token is not a valid number.
        """
        if amount_str is None:
            raise AmountParseError(str(amount_str), "empty value")

        cleaned = self._clean_amount_string(amount_str)
        if not cleaned:
            raise AmountParseError(amount_str, "no digits")

        cleaned = self._handle_separators(cleaned)

        try:
            return Decimal(cleaned)
        except InvalidOperation as e:
            raise AmountParseError(amount_str, str(e))

    def to_decimal(self, amount_str: str) -> Optional[Decimal]:
        """
        Parse an amount, returning None instead of raising.

        Args:
            amount_str: Amount token.

        Returns:
            Decimal value or None.
        """
        try:
            return self.parse(amount_str)
        except AmountParseError as e:
            logger.debug(str(e))
            return None

    def _clean_amount_string(self, amount_str: str) -> str:
        """Strip currency markers and whitespace, keep digits and separators."""
        for symbol in self.CURRENCY_SYMBOLS:
            amount_str = amount_str.replace(symbol, '')

        for code in self.CURRENCY_CODES:
            amount_str = re.sub(rf'\b{code}\b', '', amount_str, flags=re.IGNORECASE)

        amount_str = re.sub(r'\s+', '', amount_str)
        return re.sub(r'[^\d,.\-]', '', amount_str)

    def _handle_separators(self, amount_str: str) -> str:
        """
        Convert to a plain dot-decimal string.

        The right-most separator followed by at most two digits is the
        decimal separator; every other separator is a thousands mark.
        """
        last_comma = amount_str.rfind(',')
        last_dot = amount_str.rfind('.')

        if last_comma == -1 and last_dot == -1:
            return amount_str

        decimal_pos = max(last_comma, last_dot)
        fraction = amount_str[decimal_pos + 1:]

        if len(fraction) <= 2:
            integer_part = re.sub(r'[.,]', '', amount_str[:decimal_pos])
            return f"{integer_part}.{fraction}"

        # Separators only used as thousand marks
        return re.sub(r'[.,]', '', amount_str)

    def find_amounts(self, text: str) -> List[str]:
        """Return every amount token in text, in order."""
        return _AMOUNT_RE.findall(text)

    def amounts_in(self, text: str) -> List[Decimal]:
        """Return every parseable amount in text, in order."""
        values = []
        for token in self.find_amounts(text):
            value = self.to_decimal(token)
            if value is not None:
                values.append(value)
        return values

    def currency_amount(self, text: str) -> Optional[Decimal]:
        """
        Return the first amount preceded by a currency marker.

        Args:
            text: A single line.

        Returns:
            Decimal value or None.
        """
        match = _CURRENCY_AMOUNT_RE.search(text)
        if not match:
            return None
        return self.to_decimal(match.group(1))


class DateNormalizer:
    """
    Converts printed invoice dates into date objects.

    Dates on Dutch invoices are day-first; Dutch month names are
    translated before handing the string to dateutil.

    Example:
        >>> DateNormalizer().to_date("15-03-2024")
        datetime.date(2024, 3, 15)
        >>> DateNormalizer().to_iso("3 maart 2024")
        '2024-03-03'
    """

    DUTCH_MONTHS = {
        'januari': 'January',
        'februari': 'February',
        'maart': 'March',
        'mrt': 'Mar',
        'mei': 'May',
        'juni': 'June',
        'juli': 'July',
        'augustus': 'August',
        'oktober': 'October',
        'okt': 'Oct',
    }

    def to_date(self, date_str: Optional[str]) -> Optional[date]:
        """
        Parse a printed date.

        Args:
            date_str: Date as printed on the invoice.

        Returns:
            date or None when the value cannot be parsed.
        """
        if not date_str:
            return None

        cleaned = self._translate_months(' '.join(date_str.split()))

        try:
            return date_parser.parse(cleaned, dayfirst=True).date()
        except (ValueError, OverflowError) as e:
            logger.debug(f"Could not parse date '{date_str}': {e}")
            return None

    def to_iso(self, date_str: Optional[str]) -> Optional[str]:
        """Return the ISO (YYYY-MM-DD) form of a printed date, or None."""
        parsed = self.to_date(date_str)
        return parsed.isoformat() if parsed else None

    def _translate_months(self, date_str: str) -> str:
        def replace(match):
            word = match.group(0)
            return self.DUTCH_MONTHS.get(word.lower().rstrip('.'), word)

        return re.sub(r'[A-Za-z]+\.?', replace, date_str)
