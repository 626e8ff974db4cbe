"""
Post-Processing Module for the OCR Invoice Parser.

This module provides functionality for:
    - Amount normalization (decimal comma, thousand separators)
    - Date normalization
    - Cross-field reconciliation of totals, IBAN and line items

Author: ML Engineering Team
"""

from .normalizers import DateNormalizer, AmountNormalizer, round_money
from .reconciler import FinancialReconciler, CrossFieldReconciler

__all__ = [
    'DateNormalizer',
    'AmountNormalizer',
    'round_money',
    'FinancialReconciler',
    'CrossFieldReconciler',
]
