"""
Unit tests for line normalization and structure analysis.
"""

from invoice_parser.text_processing import (
    SECTIONS,
    DocumentStructure,
    StructureAnalyzer,
    join_lines,
    normalize_lines,
)


class TestNormalizeLines:
    """Tests for normalize_lines"""

    def test_trims_and_collapses_whitespace(self):
        lines = normalize_lines("  Factuur \n\n Totaal   € 121,00 \n")
        assert lines == ["Factuur", "Totaal € 121,00"]

    def test_none_and_blank_input(self):
        assert normalize_lines(None) == []
        assert normalize_lines("") == []
        assert normalize_lines(" \n\t\n ") == []

    def test_windows_line_endings(self):
        assert normalize_lines("a\r\nb\r\n") == ["a", "b"]

    def test_idempotent(self, sample_text):
        once = normalize_lines(sample_text)
        twice = normalize_lines(join_lines(once))
        assert once == twice


class TestDocumentStructure:
    """Tests for the read-only section container"""

    def test_indices_union_sorted_unique(self):
        structure = DocumentStructure({'header': [0, 1], 'invoice_meta': [4, 1]}, 6)
        assert structure.indices('invoice_meta', 'header') == [0, 1, 4]

    def test_first_last_contains(self):
        structure = DocumentStructure({'totals': [7, 3, 5]}, 10)
        assert structure.first('totals') == 3
        assert structure.last('totals') == 7
        assert structure.contains('totals', 5)
        assert not structure.contains('totals', 4)

    def test_empty_sections(self):
        structure = DocumentStructure({}, 0)
        assert structure.first('line_items') is None
        assert structure.last('vendor') is None
        assert set(structure.as_dict()) == set(SECTIONS)
        assert all(v == () for v in structure.as_dict().values())


class TestStructureAnalyzer:
    """Tests for section tagging"""

    def test_empty_document(self):
        structure = StructureAnalyzer().analyze([])
        assert all(not members for members in structure.as_dict().values())

    def test_header_is_first_fifth(self):
        lines = [f"regel {i}" for i in range(20)]
        structure = StructureAnalyzer().analyze(lines)
        assert structure.indices('header') == [0, 1, 2, 3]

    def test_header_ratio_override(self):
        lines = [f"regel {i}" for i in range(10)]
        structure = StructureAnalyzer(header_ratio=0.5).analyze(lines)
        assert structure.indices('header') == [0, 1, 2, 3, 4]

    def test_sample_sections(self, sample_structure):
        assert sample_structure.contains('vendor', 0)
        assert sample_structure.contains('invoice_meta', 10)
        assert sample_structure.contains('customer', 13)
        assert sample_structure.first('line_items') == 17
        assert sample_structure.indices('totals')[:3] == [19, 20, 21]
        assert sample_structure.contains('payment', 23)

    def test_lines_can_sit_in_several_sections(self):
        sections = StructureAnalyzer().line_sections("btw 21% € 21,00")
        assert 'totals' in sections
        assert 'line_items' in sections

    def test_iban_shape_marks_payment(self):
        sections = StructureAnalyzer().line_sections("NL91ABNA0417164300")
        assert sections == ['payment']

    def test_currency_amount_marks_totals(self):
        assert 'totals' in StructureAnalyzer().line_sections("Verzendkosten € 6,95")
