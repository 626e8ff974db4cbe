"""
Unit tests for totals extraction and reconciliation.
"""

from decimal import Decimal

from invoice_parser.extraction import FinancialExtractor
from invoice_parser.models import FinancialInfo, InvoiceRecord, LineItem
from invoice_parser.postprocessor import CrossFieldReconciler, FinancialReconciler


class TestFinancialExtractor:
    """Tests for keyword + currency amount lines"""

    def test_sample_totals(self, sample_record):
        financial = sample_record.financial
        assert financial.subtotal == Decimal('100.00')
        assert financial.tax_rate == Decimal('21')
        assert financial.tax_amount == Decimal('21.00')
        assert financial.total_amount == Decimal('121.00')
        assert financial.tax_type == "BTW"

    def test_subtotal_and_tax_only(self, run_stage):
        record = run_stage("Totaal excl. btw € 100,00\nbtw 21% € 21,00", FinancialExtractor())
        assert record.financial.subtotal == Decimal('100.00')
        assert record.financial.tax_rate == Decimal('21')
        assert record.financial.tax_amount == Decimal('21.00')
        assert record.financial.total_amount is None

    def test_english_totals(self, run_stage):
        text = "Subtotal $ 200.00\nVAT 20% $ 40.00\nAmount due $ 240.00"
        financial = run_stage(text, FinancialExtractor()).financial
        assert financial.subtotal == Decimal('200.00')
        assert financial.tax_rate == Decimal('20')
        assert financial.tax_amount == Decimal('40.00')
        assert financial.total_amount == Decimal('240.00')
        assert financial.tax_type == "VAT"

    def test_discount_and_shipping(self, run_stage):
        text = "Korting € 5,00\nVerzendkosten € 6,95\nTotaal incl. btw € 121,00"
        financial = run_stage(text, FinancialExtractor()).financial
        assert financial.discount_amount == Decimal('5.00')
        assert financial.shipping_amount == Decimal('6.95')
        assert financial.total_amount == Decimal('121.00')

    def test_tax_line_with_taxable_base(self, run_stage):
        text = "Totaal excl. btw € 100,00\nBTW 21% over € 100,00 € 21,00"
        record = run_stage(text, FinancialExtractor())
        CrossFieldReconciler().apply(record)
        assert record.financial.tax_amount == Decimal('21.00')
        assert record.financial.total_amount == Decimal('121.00')

    def test_thousands_separator(self, run_stage):
        record = run_stage("Totaal incl. btw € 1.234,56", FinancialExtractor())
        assert record.financial.total_amount == Decimal('1234.56')

    def test_last_totals_line_wins(self, run_stage):
        text = "Totaal incl. btw € 100,00\nCorrectie\nTotaal incl. btw € 121,00"
        record = run_stage(text, FinancialExtractor())
        assert record.financial.total_amount == Decimal('121.00')

    def test_keyword_without_amount(self, run_stage):
        record = run_stage("Totaal incl. btw\nTe betalen binnen 14 dagen", FinancialExtractor())
        assert not record.financial.has_amounts()


class TestFinancialReconciler:
    """Tests for the totals identities"""

    def test_total_from_subtotal_and_tax(self):
        financial = FinancialInfo(subtotal=Decimal('100.00'), tax_amount=Decimal('21.00'))
        FinancialReconciler().reconcile(financial)
        assert financial.total_amount == Decimal('121.00')

    def test_subtotal_from_total_with_default_rate(self):
        financial = FinancialInfo(total_amount=Decimal('121.00'))
        FinancialReconciler().reconcile(financial)
        assert financial.subtotal == Decimal('100.00')
        assert financial.tax_amount == Decimal('21.00')
        assert financial.tax_rate == Decimal('21')

    def test_subtotal_from_total_with_captured_rate(self):
        financial = FinancialInfo(total_amount=Decimal('109.00'), tax_rate=Decimal('9'))
        FinancialReconciler().reconcile(financial)
        assert financial.subtotal == Decimal('100.00')
        assert financial.tax_amount == Decimal('9.00')
        assert financial.tax_rate == Decimal('9')

    def test_default_rate_override(self):
        financial = FinancialInfo(total_amount=Decimal('106.00'))
        FinancialReconciler(default_tax_rate=Decimal('6')).reconcile(financial)
        assert financial.subtotal == Decimal('100.00')
        assert financial.tax_rate == Decimal('6')

    def test_subtotal_is_rounded(self):
        financial = FinancialInfo(total_amount=Decimal('10.00'))
        FinancialReconciler().reconcile(financial)
        assert financial.subtotal == Decimal('8.26')
        assert financial.tax_amount == Decimal('1.74')

    def test_tax_from_subtotal_and_total(self):
        financial = FinancialInfo(subtotal=Decimal('100.00'), total_amount=Decimal('121.00'))
        FinancialReconciler().reconcile(financial)
        assert financial.tax_amount == Decimal('21.00')
        assert financial.tax_rate == Decimal('21.0')

    def test_inconsistent_tax_is_repaired(self):
        financial = FinancialInfo(
            subtotal=Decimal('100.00'),
            tax_amount=Decimal('25.00'),
            total_amount=Decimal('121.00')
        )
        FinancialReconciler().reconcile(financial)
        assert financial.tax_amount == Decimal('21.00')

    def test_consistent_values_untouched(self):
        financial = FinancialInfo(
            subtotal=Decimal('100.00'),
            tax_amount=Decimal('21.01'),
            total_amount=Decimal('121.00')
        )
        FinancialReconciler().reconcile(financial)
        assert financial.tax_amount == Decimal('21.01')

    def test_nothing_invented(self):
        financial = FinancialInfo()
        FinancialReconciler().reconcile(financial)
        assert not financial.has_amounts()

    def test_division_fault_leaves_fields_unset(self):
        financial = FinancialInfo(total_amount=Decimal('121.00'), tax_rate=Decimal('-100'))
        FinancialReconciler().reconcile(financial)
        assert financial.subtotal is None
        assert financial.tax_amount is None


class TestCrossFieldReconciler:
    """Tests for the cross-field fallbacks"""

    def test_payment_iban_copied_to_vendor(self):
        record = InvoiceRecord()
        record.payment.iban = "NL91ABNA0417164300"
        CrossFieldReconciler().apply(record)
        assert record.vendor.iban == "NL91ABNA0417164300"

    def test_vendor_iban_copied_to_payment(self):
        record = InvoiceRecord()
        record.vendor.iban = "NL91ABNA0417164300"
        CrossFieldReconciler().apply(record)
        assert record.payment.iban == "NL91ABNA0417164300"

    def test_single_unpriced_item_takes_subtotal(self):
        record = InvoiceRecord(line_items=[LineItem(description="Adviesuren", quantity=Decimal('2'))])
        record.financial.total_amount = Decimal('121.00')
        CrossFieldReconciler().apply(record)
        item = record.line_items[0]
        assert item.unit_price == Decimal('100.00')
        assert item.line_total == Decimal('200.00')

    def test_several_unpriced_items_untouched(self):
        record = InvoiceRecord(line_items=[LineItem(description="A"), LineItem(description="B")])
        record.financial.subtotal = Decimal('50.00')
        CrossFieldReconciler().apply(record)
        assert all(item.unit_price is None for item in record.line_items)

    def test_no_subtotal_no_price(self):
        record = InvoiceRecord(line_items=[LineItem(description="A", quantity=Decimal('1'))])
        CrossFieldReconciler().apply(record)
        assert record.line_items[0].unit_price is None
