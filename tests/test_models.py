"""
Unit tests for the invoice record graph.
"""

import json
from decimal import Decimal

from invoice_parser.models import InvoiceRecord, LineItem


class TestInvoiceRecord:
    """Tests for record serialization"""

    def test_empty_record_has_full_shape(self):
        data = InvoiceRecord().to_dict()
        assert set(data) == set(InvoiceRecord.HEADER_FIELDS) | {
            'vendor', 'customer', 'financial', 'line_items', 'payment', 'raw_text_lines'
        }
        assert data['vendor']['address']['city'] is None
        assert data['financial']['total_amount'] is None
        assert data['line_items'] == []

    def test_keys_identical_across_records(self, sample_record):
        assert InvoiceRecord().to_dict().keys() == sample_record.to_dict().keys()
        assert (
            InvoiceRecord().to_dict()['vendor'].keys()
            == sample_record.to_dict()['vendor'].keys()
        )

    def test_json_amounts_are_numbers(self, sample_record):
        data = json.loads(sample_record.to_json())
        assert data['financial']['total_amount'] == 121.0
        assert data['line_items'][0]['quantity'] == 2.0
        assert data['vendor']['company_name'] == "Acme Solutions B.V."

    def test_from_dict_restores_decimals(self, sample_record):
        restored = InvoiceRecord.from_dict(json.loads(sample_record.to_json()))
        assert restored.financial.total_amount == Decimal('121.0')
        assert restored.line_items[0].unit_price == Decimal('49.5')
        assert restored.customer.address.city == "Utrecht"
        assert restored.invoice_number == sample_record.invoice_number

    def test_missing_and_extracted_fields(self):
        record = InvoiceRecord(invoice_number="F2024-0091", currency="EUR")
        assert record.extracted_fields == {'invoice_number': "F2024-0091", 'currency': "EUR"}
        assert 'invoice_date' in record.missing_fields
        assert 'invoice_number' not in record.missing_fields

    def test_line_item_dict(self):
        item = LineItem(description="Koffie", quantity=Decimal('2'), line_total=Decimal('9.00'))
        assert item.to_dict() == {
            'description': "Koffie",
            'quantity': 2.0,
            'unit': None,
            'unit_price': None,
            'tax_rate': None,
            'line_total': 9.0,
            'product_code': None,
        }
