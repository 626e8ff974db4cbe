"""
Reconciler Module.

Runs after every independent extractor and fills values that depend on
several fields at once:

    1. FinancialReconciler: totals identities
       (subtotal + tax = total, tax derived from the rate)
    2. IBAN cross-reference between vendor and payment
    3. Single line item without a price takes the subtotal

Author: ML Engineering Team
"""

from decimal import Decimal, DivisionByZero, InvalidOperation
from typing import Optional

from config import get_config
from invoice_parser.models import FinancialInfo, InvoiceRecord
from invoice_parser.utils.logger import get_logger
from .normalizers import round_money

logger = get_logger(__name__)


class FinancialReconciler:
    """
    Completes and repairs invoice totals.

    Rules, applied in order:
        1. subtotal and tax known, total missing: total = subtotal + tax
        2. otherwise total known, subtotal missing: subtotal is derived
           from the rate (captured or default) and tax = total - subtotal
        3. subtotal and total known, tax missing: tax = total - subtotal
        4. all three known but inconsistent: tax = total - subtotal

    Nothing is invented when no amount was found.

    Example:
        >>> financial = FinancialInfo(total_amount=Decimal('121.00'))
        >>> FinancialReconciler().reconcile(financial)
        >>> financial.subtotal, financial.tax_amount, financial.tax_rate
        (Decimal('100.00'), Decimal('21.00'), Decimal('21'))
    """

    def __init__(
        self,
        default_tax_rate: Optional[Decimal] = None,
        tolerance: Optional[Decimal] = None
    ) -> None:
        rate = default_tax_rate if default_tax_rate is not None else get_config(
            "financial.default_tax_rate", 21
        )
        self.default_tax_rate = Decimal(str(rate))
        self.tolerance = Decimal(str(
            tolerance if tolerance is not None else get_config("financial.tolerance", 0.01)
        ))

    def reconcile(self, financial: FinancialInfo) -> FinancialInfo:
        """
        Apply the totals identities to a FinancialInfo in place.

        Args:
            financial: Extracted totals.

        Returns:
            The same FinancialInfo, for chaining.
        """
        try:
            self._apply_rules(financial)
        except (InvalidOperation, DivisionByZero) as e:
            logger.warning(f"Could not reconcile totals: {e}")
        return financial

    def _apply_rules(self, financial: FinancialInfo) -> None:
        subtotal = financial.subtotal
        tax = financial.tax_amount
        total = financial.total_amount

        if subtotal is not None and tax is not None and total is None:
            financial.total_amount = subtotal + tax
            logger.debug(f"Derived total {financial.total_amount} from subtotal + tax")

        elif total is not None and subtotal is None:
            rate = financial.tax_rate if financial.tax_rate is not None else self.default_tax_rate
            financial.subtotal = round_money(total / (1 + rate / 100))
            financial.tax_amount = total - financial.subtotal
            if financial.tax_rate is None:
                financial.tax_rate = rate
            logger.debug(
                f"Derived subtotal {financial.subtotal} and tax {financial.tax_amount} "
                f"from total at {rate}%"
            )

        elif subtotal is not None and total is not None and tax is None:
            financial.tax_amount = total - subtotal
            if financial.tax_rate is None and subtotal > 0:
                financial.tax_rate = (financial.tax_amount / subtotal * 100).quantize(Decimal('0.1'))
            logger.debug(f"Derived tax {financial.tax_amount} from total - subtotal")

        elif subtotal is not None and tax is not None and total is not None:
            if abs(subtotal + tax - total) > self.tolerance:
                logger.warning(
                    f"Totals do not add up ({subtotal} + {tax} != {total}), "
                    f"using tax = total - subtotal"
                )
                financial.tax_amount = total - subtotal


class CrossFieldReconciler:
    """
    Applies every cross-field rule to a finished record.

    Example:
        >>> CrossFieldReconciler().apply(record)
    """

    def __init__(self, financial_reconciler: Optional[FinancialReconciler] = None) -> None:
        self.financial_reconciler = financial_reconciler or FinancialReconciler()

    def apply(self, record: InvoiceRecord) -> InvoiceRecord:
        """
        Reconcile a record in place.

        Order: totals identities, IBAN cross-reference, single-item
        subtotal fallback. The fallback sees a derived subtotal.
        """
        self.financial_reconciler.reconcile(record.financial)
        self.reconcile_iban(record)
        self.fill_single_item_price(record)
        return record

    @staticmethod
    def reconcile_iban(record: InvoiceRecord) -> None:
        """Copy the IBAN to whichever of vendor/payment lacks it."""
        vendor, payment = record.vendor, record.payment

        if payment.iban and not vendor.iban:
            vendor.iban = payment.iban
            logger.debug("Vendor IBAN taken from payment details")
        elif vendor.iban and not payment.iban:
            payment.iban = vendor.iban
            logger.debug("Payment IBAN taken from vendor details")

    @staticmethod
    def fill_single_item_price(record: InvoiceRecord) -> None:
        """
        Price the only unpriced line item with the subtotal.

        Applies only when exactly one item lacks a unit price and a
        subtotal is known.
        """
        subtotal = record.financial.subtotal
        if subtotal is None:
            return

        unpriced = [item for item in record.line_items if item.unit_price is None]
        if len(unpriced) != 1:
            return

        item = unpriced[0]
        quantity = item.quantity if item.quantity is not None else Decimal(1)
        item.unit_price = subtotal
        item.line_total = round_money(subtotal * quantity)
        logger.debug(f"Line item '{item.description}' priced from subtotal {subtotal}")
