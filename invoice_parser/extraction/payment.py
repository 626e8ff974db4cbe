"""
Payment Extractor.

Extracts payment terms, IBAN, BIC, payment method, payment reference
and bank account. The IBAN cross-reference with the vendor record is
applied afterwards by the CrossFieldReconciler.

Author: ML Engineering Team
"""

import re
from typing import Dict, List, Optional

from config import get_config
from invoice_parser.models import InvoiceRecord
from invoice_parser.text_processing import DocumentStructure
from invoice_parser.utils.logger import get_logger
from .patterns import PatternRule, bank_account_rule, find_iban, first_match

logger = get_logger(__name__)

DEFAULT_TERMS_TEMPLATE = "{days} dagen"

DEFAULT_METHODS = {
    'ideal': 'iDEAL',
    'overboeking': 'bank transfer',
    'bank transfer': 'bank transfer',
    'automatische incasso': 'direct debit',
    'incasso': 'direct debit',
    'direct debit': 'direct debit',
    'creditcard': 'credit card',
    'credit card': 'credit card',
    'paypal': 'PayPal',
}

# Two alternatives, one capture group each
SECTION_TERMS = re.compile(r'binnen\s*(\d+)\s*dagen|pay.*?within\s*(\d+)\s*days', re.IGNORECASE)
LABELED_TERMS = re.compile(
    r'(?:betaaltermijn|betalingstermijn|payment\s*terms?)\s*[:\-]?\s*(\d+)\s*(?:dagen|days)',
    re.IGNORECASE
)

BIC_RULES = [
    PatternRule.build(
        'bic',
        r'(?i:\b(?:bic|swift)(?:\s*code)?)\s*[:\-]?\s*([A-Z]{4}[A-Z]{2}[A-Z0-9]{2}(?:[A-Z0-9]{3})?)\b',
        flags=0
    ),
]

REFERENCE_RULES = [
    PatternRule.build(
        'payment reference',
        r'(?:betalingskenmerk|betaalkenmerk|payment\s*reference|o\.v\.v\.)\s*[:\-]?\s*'
        r'(\d[\d ]*\d|[A-Z0-9][A-Z0-9\-/]*[A-Z0-9])',
        lambda v: any(ch.isdigit() for ch in v)
    ),
]


class PaymentExtractor:
    """
    Extracts payment terms and bank details.

    Attributes:
        terms_template: Format string rendering the payment term days.
        methods: Keyword to payment-method label mapping.

    Example:
        >>> PaymentExtractor().extract(record, lines, structure, text)
        >>> record.payment.payment_terms
        '14 dagen'
    """

    def __init__(
        self,
        terms_template: Optional[str] = None,
        methods: Optional[Dict[str, str]] = None
    ) -> None:
        self.terms_template = terms_template or get_config(
            "payment.terms_template", DEFAULT_TERMS_TEMPLATE
        )
        method_map = methods or get_config("payment.methods", DEFAULT_METHODS)
        # Longest keyword first, so it wins when two keywords start at one position
        self.methods = [
            (re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE), label)
            for keyword, label in sorted(method_map.items(), key=lambda kv: len(kv[0]), reverse=True)
        ]
        self.bank_account_rules = [bank_account_rule()]

    def extract(
        self,
        record: InvoiceRecord,
        lines: List[str],
        structure: DocumentStructure,
        text: str
    ) -> None:
        """
        Fill record.payment in place.

        Args:
            record: Record being built.
            lines: Normalized lines.
            structure: Section membership of the lines.
            text: Normalized full text.
        """
        payment = record.payment
        payment_text = ' '.join(lines[i] for i in structure.indices("payment"))

        payment.payment_terms = self.extract_terms(payment_text, text)
        payment.iban = find_iban(text)

        for field_name, rules in (
            ('bic', BIC_RULES),
            ('payment_reference', REFERENCE_RULES),
            ('bank_account', self.bank_account_rules),
        ):
            found = first_match(rules, text)
            if found:
                setattr(payment, field_name, found[1])
                logger.debug(f"Payment {field_name}: {found[1]}")

        payment.payment_method = self.extract_method(text)

    def extract_terms(self, payment_text: str, text: str) -> Optional[str]:
        """
        Find the payment term in days.

        The payment section is searched first; the labeled form
        ("Betaaltermijn: 30 dagen") is searched in the full text.

        Returns:
            Rendered term (e.g. "14 dagen") or None.
        """
        days = None

        match = SECTION_TERMS.search(payment_text)
        if match:
            days = match.group(1) or match.group(2)
        else:
            match = LABELED_TERMS.search(text)
            if match:
                days = match.group(1)

        if days is None:
            return None

        terms = self.terms_template.format(days=int(days))
        logger.debug(f"Payment terms: {terms}")
        return terms

    def extract_method(self, text: str) -> Optional[str]:
        """Map the earliest known payment keyword in the text to its label."""
        best = None
        for pattern, label in self.methods:
            match = pattern.search(text)
            if match and (best is None or match.start() < best[0]):
                best = (match.start(), label)
        return best[1] if best else None
