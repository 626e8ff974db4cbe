"""
Record Models for the OCR Invoice Parser.

Dataclasses describing the structured invoice record:
    - InvoiceRecord (root)
    - VendorInfo, CustomerInfo, AddressInfo
    - FinancialInfo, LineItem, PaymentInfo
"""

from .invoice_record import (
    AddressInfo,
    CustomerInfo,
    FinancialInfo,
    InvoiceRecord,
    LineItem,
    PaymentInfo,
    VendorInfo,
)

__all__ = [
    'AddressInfo',
    'CustomerInfo',
    'FinancialInfo',
    'InvoiceRecord',
    'LineItem',
    'PaymentInfo',
    'VendorInfo',
]
