"""
Shared pytest fixtures.

The sample invoice mirrors the OCR output of a typical Dutch invoice:
vendor block, invoice metadata, customer block, items table, totals
and payment instructions.
"""

import pytest

from invoice_parser.extraction import InvoiceTextExtractor
from invoice_parser.models import InvoiceRecord
from invoice_parser.text_processing import StructureAnalyzer, join_lines, normalize_lines


SAMPLE_INVOICE = """Acme Solutions B.V.
Keizersgracht 123
1015 CJ Amsterdam
Nederland
Tel: 020-1234567
info@acme-solutions.nl
www.acme-solutions.nl
BTW nummer: NL123456789B01
KvK: 12345678
Factuur
Factuurnummer: F2024-0091
Factuurdatum: 15-03-2024
Vervaldatum: 29-03-2024
Klantnummer: K-1042
Bakkerij De Molen
Dorpsstraat 7
3511 AB Utrecht
Omschrijving   Aantal   Prijs   Totaal
2 Onderhoud contract 49,50 99,00
Totaal excl. btw € 100,00
btw 21% € 21,00
Totaal incl. btw € 121,00
Wij verzoeken u het bedrag binnen 14 dagen te betalen
IBAN: NL91ABNA0417164300
BIC: ABNANL2A
"""


@pytest.fixture
def sample_text():
    """OCR text of a complete Dutch invoice"""
    return SAMPLE_INVOICE


@pytest.fixture
def sample_lines(sample_text):
    return normalize_lines(sample_text)


@pytest.fixture
def sample_structure(sample_lines):
    return StructureAnalyzer().analyze(sample_lines)


@pytest.fixture
def extractor():
    return InvoiceTextExtractor()


@pytest.fixture
def sample_record(extractor, sample_text):
    """Record extracted from the sample invoice"""
    return extractor.extract(sample_text, source_file="sample.txt")


@pytest.fixture
def run_stage():
    """
    Run extraction stages on a text and return the record.

    Stages run in the order given against one shared record, so a
    customer stage can see what the vendor stage found.
    """
    def _run(text, *stages, header_ratio=None):
        lines = normalize_lines(text)
        structure = StructureAnalyzer(header_ratio=header_ratio).analyze(lines)
        record = InvoiceRecord()
        for stage in stages:
            stage.extract(record, lines, structure, join_lines(lines))
        return record
    return _run
