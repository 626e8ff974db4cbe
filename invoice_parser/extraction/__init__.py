"""
Extraction Module for the OCR Invoice Parser.

This module provides the heuristic extraction stages and the
InvoiceTextExtractor orchestrator that runs them in order.
"""

from .basic_info import BasicInfoExtractor
from .customer import CustomerExtractor
from .extractor import InvoiceTextExtractor
from .financial import FinancialExtractor
from .line_items import LineItemBuilder
from .locale_detector import LocaleDetector
from .patterns import PatternRule, find_iban, first_match
from .payment import PaymentExtractor
from .scoring import best_candidate, score_candidate
from .vendor import VendorExtractor

__all__ = [
    'InvoiceTextExtractor',
    'BasicInfoExtractor',
    'VendorExtractor',
    'CustomerExtractor',
    'FinancialExtractor',
    'LineItemBuilder',
    'PaymentExtractor',
    'LocaleDetector',
    'PatternRule',
    'first_match',
    'find_iban',
    'score_candidate',
    'best_candidate',
]
