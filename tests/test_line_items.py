"""
Unit tests for line item recognition and cross-derivation.
"""

from decimal import Decimal

import pytest

from invoice_parser.extraction import LineItemBuilder


@pytest.fixture
def builder():
    return LineItemBuilder()


class TestBuildItem:
    """Tests for single-row recognition"""

    def test_quantity_price_total(self, builder):
        item = builder.build_item("2 Onderhoud contract 49,50 99,00")
        assert item.quantity == Decimal('2')
        assert item.unit_price == Decimal('49.50')
        assert item.line_total == Decimal('99.00')
        assert "Onderhoud contract" in item.description

    def test_middle_amounts_ignored(self, builder):
        item = builder.build_item("2 Adviesuren 45,00 5,00 90,00")
        assert item.unit_price == Decimal('45.00')
        assert item.line_total == Decimal('90.00')

    def test_single_amount_is_line_total(self, builder):
        item = builder.build_item("3 Koffiebekers 22,50")
        assert item.line_total == Decimal('22.50')
        assert item.quantity == Decimal('3')
        assert item.unit_price == Decimal('7.50')

    def test_quantity_derived_from_prices(self, builder):
        item = builder.build_item("Licentie 19,99 39,98")
        assert item.quantity == Decimal('2')
        assert str(item.quantity) == '2'

    def test_quantity_defaults_to_one(self, builder):
        item = builder.build_item("Installatie 75,00")
        assert item.quantity == Decimal('1')
        assert item.line_total == Decimal('75.00')
        assert item.unit_price is None

    def test_unit_and_tax_rate(self, builder):
        item = builder.build_item("Consultancy 8 uur 21% 75,00 600,00")
        assert item.quantity == Decimal('8')
        assert item.unit == "uur"
        assert item.tax_rate == Decimal('21')
        assert item.unit_price == Decimal('75.00')
        assert item.line_total == Decimal('600.00')

    def test_product_code(self, builder):
        item = builder.build_item("Artikel nr: A1001 Koffiebonen 2 st 12,50 25,00")
        assert item.product_code == "A1001"
        assert item.quantity == Decimal('2')
        assert item.unit == "st"

    def test_product_code_without_amounts(self, builder):
        item = builder.build_item("Productcode: XR-200 Montagekit")
        assert item.product_code == "XR-200"
        assert item.quantity == Decimal('1')
        assert item.unit_price is None
        assert item.line_total is None

    def test_totals_lines_are_skipped(self, builder):
        assert builder.build_item("Totaal excl. btw € 100,00") is None
        assert builder.build_item("btw 21% € 21,00") is None
        assert builder.build_item("Omschrijving Aantal Prijs Totaal") is None

    def test_rejected_rows(self, builder):
        assert builder.build_item("abc 10,00") is None
        assert builder.build_item("Bedankt voor uw bestelling") is None
        assert builder.build_item("15-03-2024") is None

    def test_quantity_limit(self):
        builder = LineItemBuilder(max_quantity=10)
        item = builder.build_item("50 Schroeven 0,10 5,00")
        assert item.quantity == Decimal('50')
        assert LineItemBuilder(max_quantity=10).build_item("50 Schroeven 5,00").quantity == Decimal('1')

    def test_clean_description(self, builder):
        assert builder.clean_description("Webhosting € 49,50 21%") == "Webhosting"


class TestExtract:
    """Tests for the items window"""

    def test_sample_items(self, sample_record):
        assert len(sample_record.line_items) == 1
        item = sample_record.line_items[0]
        assert item.quantity == Decimal('2')
        assert item.unit_price == Decimal('49.50')
        assert item.line_total == Decimal('99.00')

    def test_currency_rows_do_not_end_window(self, run_stage):
        text = (
            "Omschrijving Aantal Prijs\n"
            "1 Webhosting € 49,50\n"
            "2 Domeinnaam € 10,00 € 20,00\n"
            "Totaal excl. btw € 69,50\n"
            "Extra regel 99,99\n"
        )
        items = run_stage(text, LineItemBuilder()).line_items
        assert [item.description for item in items] == ["1 Webhosting", "2 Domeinnaam"]
        assert items[0].unit_price == Decimal('49.50')
        assert items[1].quantity == Decimal('2')
        assert items[1].line_total == Decimal('20.00')

    def test_no_items_section(self, run_stage):
        record = run_stage("Factuur\nTotaal incl. btw € 121,00", LineItemBuilder())
        assert record.line_items == []

    def test_items_complete(self, sample_record):
        for item in sample_record.line_items:
            assert item.quantity is not None
            assert item.unit_price is not None or item.line_total is not None
