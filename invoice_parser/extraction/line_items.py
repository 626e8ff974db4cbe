"""
Line Item Builder.

Recovers purchased items from the block between the first line-items
line and the totals block. Each recognized row becomes a LineItem with
description, quantity, unit price and line total; missing values are
cross-derived (price = total / qty, total = price * qty,
qty = total / price) before quantity defaults to 1.

Author: ML Engineering Team
"""

import re
from decimal import Decimal, DivisionByZero, InvalidOperation
from typing import Iterable, List, Optional

from config import get_config
from invoice_parser.models import InvoiceRecord, LineItem
from invoice_parser.postprocessor.normalizers import (
    AMOUNT_TOKEN,
    CURRENCY_MARKER,
    AmountNormalizer,
    round_money,
)
from invoice_parser.text_processing import DocumentStructure
from invoice_parser.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PRODUCT_CODE_PATTERNS = [
    r'product\s*(?:nummer|nr|code)\.?\s*[:\-]?\s*([A-Z0-9][A-Z0-9\-]*)',
    r'\b(?:art(?:ikel)?|sku)\.?\s*(?:nummer|nr|no)?\.?\s*[:\-]?\s*([A-Z0-9]*\d[A-Z0-9\-]*)',
]

DEFAULT_UNITS = ['st', 'stuks', 'stuk', 'uur', 'uren', 'pcs', 'pc', 'hours', 'hrs', 'kg', 'm2', 'x']

TOTALS_KEYWORDS = re.compile(
    r'totaal|subtota|\btotal\b|\bbtw\b|\bvat\b|te\s*betalen|amount\s*due', re.IGNORECASE
)
WINDOW_END_KEYWORDS = re.compile(
    r'totaal|subtota|\btotal\b|(?:btw|vat)\s*\d+\s*%|te\s*betalen|amount\s*due', re.IGNORECASE
)
LETTERS = re.compile(r'[A-Za-z]{3,}')
PERCENTAGE = re.compile(r'(\d{1,2}(?:[.,]\d{1,2})?)\s*%')
CURRENCY_AMOUNT_TEXT = re.compile(rf'{CURRENCY_MARKER}\s*{AMOUNT_TOKEN}', re.IGNORECASE)
BARE_AMOUNT = re.compile(AMOUNT_TOKEN)
INTEGER_TOKEN = re.compile(r'(?<![\w.,/\-])\d+(?![.,]?\d)(?![\-/]\d)')
STRAY_CURRENCY = re.compile(r'(?:€|\$|£)')

MIN_DESCRIPTION_LENGTH = 3


class LineItemBuilder:
    """
    Builds LineItem records from the line-items block.

    Attributes:
        max_quantity: Largest integer accepted as a quantity.
        trailing_window: Lines scanned past the last line-items line
            when no totals line follows.

    Example:
        >>> builder = LineItemBuilder()
        >>> item = builder.build_item("2 Onderhoud contract 49,50 99,00")
        >>> item.quantity, item.unit_price, item.line_total
        (Decimal('2'), Decimal('49.50'), Decimal('99.00'))
    """

    def __init__(
        self,
        product_code_patterns: Optional[Iterable[str]] = None,
        units: Optional[Iterable[str]] = None,
        max_quantity: Optional[int] = None,
        trailing_window: Optional[int] = None,
        amount_normalizer: Optional[AmountNormalizer] = None
    ) -> None:
        patterns = product_code_patterns or get_config(
            "line_items.product_code_patterns", DEFAULT_PRODUCT_CODE_PATTERNS
        )
        self.product_code_patterns = [re.compile(p, re.IGNORECASE) for p in patterns]

        unit_words = units or get_config("line_items.units", DEFAULT_UNITS)
        self.unit_pattern = re.compile(
            r'(?<![\w])(' + '|'.join(re.escape(u) for u in sorted(unit_words, key=len, reverse=True)) + r')\.?(?![\w])',
            re.IGNORECASE
        )

        self.max_quantity = Decimal(str(max_quantity or get_config("line_items.max_quantity", 1000)))
        self.trailing_window = (
            trailing_window if trailing_window is not None
            else get_config("line_items.trailing_window", 5)
        )
        self.amounts = amount_normalizer or AmountNormalizer()

    def extract(
        self,
        record: InvoiceRecord,
        lines: List[str],
        structure: DocumentStructure,
        text: str
    ) -> None:
        """
        Append recognized items to record.line_items.

        Args:
            record: Record being built.
            lines: Normalized lines.
            structure: Section membership of the lines.
            text: Normalized full text (unused).
        """
        for index in self.window(lines, structure):
            item = self.build_item(lines[index])
            if item is not None:
                record.line_items.append(item)
                logger.debug(f"Line item at line {index}: {item.description}")

    def window(self, lines: List[str], structure: DocumentStructure) -> range:
        """
        Line range holding the items table.

        Starts at the first line-items line and ends before the first
        labeled totals line after it, or trailing_window lines past the
        last line-items line.
        """
        start = structure.first("line_items")
        if start is None:
            return range(0)

        end = None
        for index in structure.indices("totals"):
            if index > start and WINDOW_END_KEYWORDS.search(lines[index]):
                end = index
                break

        if end is None:
            end = structure.last("line_items") + self.trailing_window

        return range(start, min(end, len(lines)))

    def build_item(self, line: str) -> Optional[LineItem]:
        """
        Build a LineItem from one line, or None when the line is not an item.

        Args:
            line: Normalized line.

        Returns:
            LineItem with cross-derived pricing, or None.
        """
        if TOTALS_KEYWORDS.search(line):
            return None

        product_code = None
        quantity_text = line
        for pattern in self.product_code_patterns:
            match = pattern.search(line)
            if match:
                product_code = match.group(1)
                quantity_text = line[:match.start()] + ' ' + line[match.end():]
                break

        description = self.clean_description(line)

        if product_code is None:
            if not (LETTERS.search(line) and BARE_AMOUNT.search(line)):
                return None
            if not description or len(description) <= MIN_DESCRIPTION_LENGTH:
                return None

        item = LineItem(description=description or None, product_code=product_code)
        self._extract_pricing(item, line, quantity_text)
        return item

    def clean_description(self, line: str) -> str:
        """Strip amounts and percentages from a line and collapse whitespace."""
        description = CURRENCY_AMOUNT_TEXT.sub(' ', line)
        description = BARE_AMOUNT.sub(' ', description)
        description = PERCENTAGE.sub(' ', description)
        description = STRAY_CURRENCY.sub(' ', description)
        return ' '.join(description.split())

    def _extract_pricing(self, item: LineItem, line: str, quantity_text: str) -> None:
        prices = self.amounts.amounts_in(line)

        if len(prices) >= 2:
            item.unit_price = prices[0]
            item.line_total = prices[-1]
        elif len(prices) == 1:
            item.line_total = prices[0]

        remainder = BARE_AMOUNT.sub(' ', quantity_text)
        tax_match = PERCENTAGE.search(remainder)
        if tax_match:
            try:
                item.tax_rate = Decimal(tax_match.group(1).replace(',', '.'))
            except InvalidOperation:
                logger.debug(f"Unreadable item tax rate: {tax_match.group(0)}")
        remainder = PERCENTAGE.sub(' ', remainder)

        item.quantity = self._find_quantity(remainder)

        unit_match = self.unit_pattern.search(remainder)
        if unit_match:
            item.unit = unit_match.group(1).lower()

        self._derive_missing(item)

    def _find_quantity(self, text: str) -> Optional[Decimal]:
        for token in INTEGER_TOKEN.findall(text):
            value = Decimal(token)
            if 0 < value <= self.max_quantity:
                return value
        return None

    def _derive_missing(self, item: LineItem) -> None:
        """Cross-derive price, total and quantity, then default quantity to 1."""
        try:
            if item.quantity is not None and item.line_total is not None and item.unit_price is None:
                item.unit_price = round_money(item.line_total / item.quantity)
            elif item.unit_price is not None and item.quantity is not None and item.line_total is None:
                item.line_total = round_money(item.unit_price * item.quantity)
            elif item.quantity is None and item.unit_price is not None and item.line_total is not None:
                quantity = item.line_total / item.unit_price
                integral = quantity.to_integral_value()
                item.quantity = integral if quantity == integral else round_money(quantity)
        except (InvalidOperation, DivisionByZero) as e:
            logger.debug(f"Could not derive item values for '{item.description}': {e}")

        if item.quantity is None:
            item.quantity = Decimal(1)
