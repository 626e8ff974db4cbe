"""
Unit tests for payment details and locale detection.
"""

from invoice_parser.extraction import LocaleDetector, PaymentExtractor
from invoice_parser.models import InvoiceRecord


class TestPaymentExtractor:
    """Tests for terms and bank details"""

    def test_sample_payment(self, sample_record):
        payment = sample_record.payment
        assert payment.payment_terms == "14 dagen"
        assert payment.iban == "NL91ABNA0417164300"
        assert payment.bic == "ABNANL2A"
        assert payment.payment_method is None

    def test_english_payment(self, run_stage):
        text = (
            "Please pay within 30 days\n"
            "IBAN: GB29NWBK60161331926819\n"
            "Payment reference: 2024 0091 77\n"
            "Paid by bank transfer"
        )
        payment = run_stage(text, PaymentExtractor(terms_template="{days} days")).payment
        assert payment.payment_terms == "30 days"
        assert payment.iban == "GB29NWBK60161331926819"
        assert payment.payment_reference == "2024 0091 77"
        assert payment.payment_method == "bank transfer"

    def test_labeled_terms_fallback(self, run_stage):
        record = run_stage("Betaaltermijn: 30 dagen", PaymentExtractor())
        assert record.payment.payment_terms == "30 dagen"

    def test_earliest_method_wins(self, run_stage):
        record = run_stage("Betaling via iDEAL of overboeking", PaymentExtractor())
        assert record.payment.payment_method == "iDEAL"

    def test_custom_methods(self, run_stage):
        extractor = PaymentExtractor(methods={'contant': 'cash'})
        assert run_stage("Contant betaald", extractor).payment.payment_method == "cash"

    def test_bank_account(self, run_stage):
        record = run_stage("Bankrekening: 12.34.56.789", PaymentExtractor())
        assert record.payment.bank_account == "12.34.56.789"

    def test_nothing_found(self, run_stage):
        payment = run_stage("Factuur\nBedankt", PaymentExtractor()).payment
        assert payment.payment_terms is None
        assert payment.iban is None
        assert payment.bic is None
        assert payment.payment_reference is None


class TestLocaleDetector:
    """Tests for language and currency"""

    def test_primary_locale_first(self):
        detector = LocaleDetector()
        assert detector.detect_language("Invoice / Factuurnummer 2024") == "Dutch"

    def test_secondary_locale(self):
        assert LocaleDetector().detect_language("Invoice number 2024-17") == "English"

    def test_unknown_language(self):
        assert LocaleDetector().detect_language("Rechnung") is None

    def test_currency_priority(self):
        detector = LocaleDetector()
        assert detector.detect_currency("$ 5,00 en € 10,00") == "EUR"
        assert detector.detect_currency("Total USD 100.00") == "USD"
        assert detector.detect_currency("Total £ 12.00") == "GBP"
        assert detector.detect_currency("Totaal 12,00") is None

    def test_extract_sets_record(self, sample_record):
        assert sample_record.language == "Dutch"
        assert sample_record.currency == "EUR"

    def test_custom_locales(self):
        detector = LocaleDetector(
            primary={'name': 'German', 'keywords': ['rechnung']},
            secondary={'name': 'English', 'keywords': ['invoice']},
            currencies=[{'code': 'CHF', 'symbols': ['Fr.']}]
        )
        record = InvoiceRecord()
        detector.extract(record, "Rechnung Fr. 12.00")
        assert record.language == "German"
        assert record.currency == "CHF"
