"""
Invoice Record Data Classes.

This module defines the structured record produced by the parser.
Every scalar field is optional: a field that could not be located is
None, never an empty string standing in for "unknown".

The graph is built fresh for each extraction call and filled in place
by the extraction stages.
"""

import json
from dataclasses import dataclass, field, fields as dataclass_fields
from decimal import Decimal
from typing import Any, Dict, List, Optional


def _to_json_value(value: Any) -> Any:
    """Render Decimals as floats so the record stays JSON compatible."""
    if isinstance(value, Decimal):
        return float(value)
    return value


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def _scalar_dict(obj: Any, skip: tuple = ()) -> Dict[str, Any]:
    return {
        f.name: _to_json_value(getattr(obj, f.name))
        for f in dataclass_fields(obj)
        if f.name not in skip
    }


@dataclass
class AddressInfo:
    """Postal address embedded in vendor and customer records."""
    street: Optional[str] = None
    house_number: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    full_address: Optional[str] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in dataclass_fields(self))

    def to_dict(self) -> Dict[str, Any]:
        return _scalar_dict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AddressInfo':
        data = data or {}
        return cls(**{f.name: data.get(f.name) for f in dataclass_fields(cls)})


@dataclass
class VendorInfo:
    """
    The company that issued the invoice.

    Attributes:
        company_name: Best scoring name candidate from the header block
        address: Postal address found in the vendor block
        iban: IBAN found anywhere in the document
    """
    company_name: Optional[str] = None
    contact_person: Optional[str] = None
    address: AddressInfo = field(default_factory=AddressInfo)
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    vat_number: Optional[str] = None
    registration_number: Optional[str] = None
    bank_account: Optional[str] = None
    iban: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = _scalar_dict(self, skip=('address',))
        result['address'] = self.address.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'VendorInfo':
        data = data or {}
        values = {
            f.name: data.get(f.name)
            for f in dataclass_fields(cls)
            if f.name != 'address'
        }
        return cls(address=AddressInfo.from_dict(data.get('address')), **values)


@dataclass
class CustomerInfo:
    """The billed party."""
    company_name: Optional[str] = None
    contact_person: Optional[str] = None
    address: AddressInfo = field(default_factory=AddressInfo)
    customer_number: Optional[str] = None
    vat_number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = _scalar_dict(self, skip=('address',))
        result['address'] = self.address.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'CustomerInfo':
        data = data or {}
        values = {
            f.name: data.get(f.name)
            for f in dataclass_fields(cls)
            if f.name != 'address'
        }
        return cls(address=AddressInfo.from_dict(data.get('address')), **values)


@dataclass
class FinancialInfo:
    """
    Invoice totals.

    When subtotal, tax_amount and total_amount are all set the
    reconciler keeps subtotal + tax_amount within 0.01 of total_amount.
    """
    subtotal: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    tax_rate: Optional[Decimal] = None
    total_amount: Optional[Decimal] = None
    tax_type: Optional[str] = None
    discount_amount: Optional[Decimal] = None
    shipping_amount: Optional[Decimal] = None

    AMOUNT_FIELDS = (
        'subtotal', 'tax_amount', 'tax_rate', 'total_amount',
        'discount_amount', 'shipping_amount'
    )

    def has_amounts(self) -> bool:
        return any(getattr(self, name) is not None for name in self.AMOUNT_FIELDS)

    def to_dict(self) -> Dict[str, Any]:
        return _scalar_dict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'FinancialInfo':
        data = data or {}
        values = {name: _to_decimal(data.get(name)) for name in cls.AMOUNT_FIELDS}
        return cls(tax_type=data.get('tax_type'), **values)


@dataclass
class LineItem:
    """A single purchased item recovered from the line-items block."""
    description: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    unit_price: Optional[Decimal] = None
    tax_rate: Optional[Decimal] = None
    line_total: Optional[Decimal] = None
    product_code: Optional[str] = None

    DECIMAL_FIELDS = ('quantity', 'unit_price', 'tax_rate', 'line_total')

    def to_dict(self) -> Dict[str, Any]:
        return _scalar_dict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LineItem':
        values = {name: _to_decimal(data.get(name)) for name in cls.DECIMAL_FIELDS}
        return cls(
            description=data.get('description'),
            unit=data.get('unit'),
            product_code=data.get('product_code'),
            **values
        )


@dataclass
class PaymentInfo:
    """Payment terms and bank details."""
    payment_terms: Optional[str] = None
    payment_method: Optional[str] = None
    bank_account: Optional[str] = None
    iban: Optional[str] = None
    bic: Optional[str] = None
    payment_reference: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _scalar_dict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PaymentInfo':
        data = data or {}
        return cls(**{f.name: data.get(f.name) for f in dataclass_fields(cls)})


@dataclass
class InvoiceRecord:
    """
    Structured representation of one OCR-scanned invoice.

    This is the root of the record graph. Sub-records are always
    present (possibly empty); scalar fields are None when not found.

    Attributes:
        invoice_number: Invoice identifier as printed
        invoice_date: Invoice date as printed (e.g. "15-03-2024")
        due_date: Payment due date as printed
        order_number: Purchase order number
        reference: Customer reference
        currency: ISO currency code detected in the text
        language: Detected document language
        notes: Free-text remarks
        raw_text_lines: Normalized lines the record was extracted from
        vendor: Issuing company
        customer: Billed party
        financial: Totals
        line_items: Purchased items
        payment: Payment terms and bank details

    Example:
        >>> record = InvoiceRecord(invoice_number="F2024-0091")
        >>> record.to_dict()["invoice_number"]
        'F2024-0091'
    """
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    due_date: Optional[str] = None
    order_number: Optional[str] = None
    reference: Optional[str] = None
    currency: Optional[str] = None
    language: Optional[str] = None
    notes: Optional[str] = None
    raw_text_lines: List[str] = field(default_factory=list)

    vendor: VendorInfo = field(default_factory=VendorInfo)
    customer: CustomerInfo = field(default_factory=CustomerInfo)
    financial: FinancialInfo = field(default_factory=FinancialInfo)
    line_items: List[LineItem] = field(default_factory=list)
    payment: PaymentInfo = field(default_factory=PaymentInfo)

    HEADER_FIELDS = (
        'invoice_number', 'invoice_date', 'due_date', 'order_number',
        'reference', 'currency', 'language', 'notes'
    )

    @property
    def fields(self) -> Dict[str, Optional[str]]:
        """
        Get the top-level scalar fields as a dictionary.

        Returns:
            Dictionary of field names to values.
        """
        return {name: getattr(self, name) for name in self.HEADER_FIELDS}

    @property
    def missing_fields(self) -> List[str]:
        """
        Get list of top-level scalar fields that were not extracted.

        Returns:
            List of missing field names.
        """
        return [k for k, v in self.fields.items() if v is None]

    @property
    def extracted_fields(self) -> Dict[str, str]:
        """Get only the top-level scalar fields that have values."""
        return {k: v for k, v in self.fields.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a nested, JSON compatible dictionary.

        Key names and nesting are identical for every record.

        Returns:
            Dictionary representation of the record.
        """
        result = dict(self.fields)
        result['vendor'] = self.vendor.to_dict()
        result['customer'] = self.customer.to_dict()
        result['financial'] = self.financial.to_dict()
        result['line_items'] = [item.to_dict() for item in self.line_items]
        result['payment'] = self.payment.to_dict()
        result['raw_text_lines'] = list(self.raw_text_lines)
        return result

    def to_json(self, indent: int = 2) -> str:
        """
        Convert to JSON string.

        Args:
            indent: JSON indentation level.

        Returns:
            JSON string representation.
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InvoiceRecord':
        """
        Create an InvoiceRecord from a dictionary produced by to_dict().

        Args:
            data: Dictionary with record data.

        Returns:
            InvoiceRecord instance.
        """
        return cls(
            vendor=VendorInfo.from_dict(data.get('vendor')),
            customer=CustomerInfo.from_dict(data.get('customer')),
            financial=FinancialInfo.from_dict(data.get('financial')),
            line_items=[LineItem.from_dict(item) for item in data.get('line_items') or []],
            payment=PaymentInfo.from_dict(data.get('payment')),
            raw_text_lines=list(data.get('raw_text_lines') or []),
            **{name: data.get(name) for name in cls.HEADER_FIELDS}
        )

    def __repr__(self) -> str:
        return (
            f"InvoiceRecord("
            f"invoice={self.invoice_number}, "
            f"vendor={self.vendor.company_name}, "
            f"total={self.financial.total_amount}, "
            f"items={len(self.line_items)})"
        )
