"""
Unit tests for invoice number, dates and reference fields.
"""

from invoice_parser.extraction import BasicInfoExtractor


class TestInvoiceNumber:
    """Tests for invoice number rules"""

    def test_dutch_label(self, run_stage):
        record = run_stage("Factuurnummer: F2024-0091\nFactuurdatum: 15-03-2024", BasicInfoExtractor())
        assert record.invoice_number == "F2024-0091"
        assert record.invoice_date == "15-03-2024"

    def test_english_label(self, run_stage):
        record = run_stage("Invoice No. INV12345\nInvoice date: 01/02/2024", BasicInfoExtractor())
        assert record.invoice_number == "INV12345"
        assert record.invoice_date == "01/02/2024"

    def test_label_word_is_rejected(self, run_stage):
        record = run_stage("Factuurnummer: nummer\n482913", BasicInfoExtractor())
        assert record.invoice_number == "482913"

    def test_standalone_code_line(self, run_stage):
        record = run_stage("2024-17\nBedankt voor uw bestelling", BasicInfoExtractor())
        assert record.invoice_number == "2024-17"

    def test_min_length_override(self, run_stage):
        text = "Factuurnummer: A12"
        assert run_stage(text, BasicInfoExtractor()).invoice_number == "A12"
        assert run_stage(text, BasicInfoExtractor(min_length=4)).invoice_number is None


class TestDates:
    """Tests for invoice and due dates"""

    def test_due_date_is_not_invoice_date(self, run_stage):
        record = run_stage("Vervaldatum: 29-03-2024\nDatum: 15-03-2024", BasicInfoExtractor())
        assert record.invoice_date == "15-03-2024"
        assert record.due_date == "29-03-2024"

    def test_month_names(self, run_stage):
        text = "Invoice Date: 3 March 2024\nDue Date: 17 March 2024"
        record = run_stage(text, BasicInfoExtractor())
        assert record.invoice_date == "3 March 2024"
        assert record.due_date == "17 March 2024"

    def test_dutch_month_name(self, run_stage):
        record = run_stage("Factuurdatum: 3 maart 2024", BasicInfoExtractor())
        assert record.invoice_date == "3 maart 2024"


class TestReferenceFields:
    """Tests for order number, reference and notes"""

    def test_english_fields(self, run_stage):
        text = (
            "Invoice Number: INV-2024-17\n"
            "Order number: PO-5531\n"
            "Your reference: REF-88\n"
            "Notes: Deliver to back door"
        )
        record = run_stage(text, BasicInfoExtractor())
        assert record.invoice_number == "INV-2024-17"
        assert record.order_number == "PO-5531"
        assert record.reference == "REF-88"
        assert record.notes == "Deliver to back door"

    def test_dutch_fields(self, run_stage):
        text = "Bestelnummer: 88213\nUw kenmerk: PRJ-12\nOpmerkingen: Levering op maandag"
        record = run_stage(text, BasicInfoExtractor())
        assert record.order_number == "88213"
        assert record.reference == "PRJ-12"
        assert record.notes == "Levering op maandag"

    def test_payment_reference_is_not_reference(self, run_stage):
        record = run_stage("Payment reference: 2024009177", BasicInfoExtractor())
        assert record.reference is None

    def test_absent_fields_stay_none(self, run_stage):
        record = run_stage("Bedankt voor uw bestelling", BasicInfoExtractor())
        assert record.invoice_number is None
        assert record.invoice_date is None
        assert record.due_date is None
        assert record.order_number is None
        assert record.reference is None
        assert record.notes is None
