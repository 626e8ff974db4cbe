"""
Financial Extractor.

Reads the invoice totals from the totals and line-items sections. A
value is only taken from a line that carries both the matching
keyword and a currency amount (e.g. "Totaal excl. btw € 100,00").

Missing totals are derived later by the FinancialReconciler.

Author: ML Engineering Team
"""

import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from invoice_parser.models import FinancialInfo, InvoiceRecord
from invoice_parser.postprocessor.normalizers import AmountNormalizer, CURRENCY_AMOUNT
from invoice_parser.text_processing import DocumentStructure
from invoice_parser.utils.logger import get_logger

logger = get_logger(__name__)

SUBTOTAL_KEYWORDS = re.compile(
    r'totaal.*excl|subtotal|subtotaal|totaalbedrag.*excl|total.*excl', re.IGNORECASE
)
TOTAL_KEYWORDS = re.compile(
    r'totaal.*incl|total.*incl|totaalbedrag.*incl|te\s*betalen|amount\s*due|grand\s*total',
    re.IGNORECASE
)
TAX_LINE = re.compile(
    rf'\b(btw|vat)\s*(\d{{1,2}}(?:[.,]\d{{1,2}})?)\s*%.*{CURRENCY_AMOUNT}',
    re.IGNORECASE
)
DISCOUNT_KEYWORDS = re.compile(r'korting|discount', re.IGNORECASE)
SHIPPING_KEYWORDS = re.compile(r'verzendkosten|verzending|bezorgkosten|shipping', re.IGNORECASE)


class FinancialExtractor:
    """
    Extracts subtotal, tax, total, discount and shipping amounts.

    A line is classified once: subtotal and total keywords take
    precedence over the tax-rate pattern, so "Totaal incl. btw 21%"
    lines never feed the tax amount.

    Example:
        >>> FinancialExtractor().extract(record, lines, structure, text)
        >>> record.financial.subtotal, record.financial.tax_rate
        (Decimal('100.00'), Decimal('21'))
    """

    def __init__(self, amount_normalizer: Optional[AmountNormalizer] = None) -> None:
        self.amounts = amount_normalizer or AmountNormalizer()

    def extract(
        self,
        record: InvoiceRecord,
        lines: List[str],
        structure: DocumentStructure,
        text: str
    ) -> None:
        """
        Fill record.financial in place.

        Later lines overwrite earlier ones, so the bottom-most totals
        block of a document wins.
        """
        financial = record.financial

        for index in structure.indices("totals", "line_items"):
            line = lines[index]

            if SUBTOTAL_KEYWORDS.search(line):
                self._set_amount(financial, 'subtotal', line)
            elif TOTAL_KEYWORDS.search(line):
                self._set_amount(financial, 'total_amount', line)
            elif DISCOUNT_KEYWORDS.search(line):
                self._set_amount(financial, 'discount_amount', line)
            elif SHIPPING_KEYWORDS.search(line):
                self._set_amount(financial, 'shipping_amount', line)
            else:
                self._set_tax(financial, line)

    def _set_amount(self, financial: FinancialInfo, field_name: str, line: str) -> None:
        amount = self.amounts.currency_amount(line)
        if amount is None:
            return
        setattr(financial, field_name, amount)
        logger.debug(f"{field_name}: {amount}")

    def _set_tax(self, financial: FinancialInfo, line: str) -> None:
        match = TAX_LINE.search(line)
        if not match:
            return

        amount = self.amounts.to_decimal(match.group(3))
        if amount is None:
            return

        try:
            rate = Decimal(match.group(2).replace(',', '.'))
        except InvalidOperation:
            logger.debug(f"Unreadable tax rate in line: {line}")
            return

        financial.tax_rate = rate
        financial.tax_amount = amount
        financial.tax_type = match.group(1).upper()
        logger.debug(f"Tax {financial.tax_type} {rate}%: {amount}")
