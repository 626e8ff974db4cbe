"""
Output Handler Module for the OCR Invoice Parser.

This module provides functionality for:
    - Per-invoice JSON records
    - Excel workbook generation (summary and line items)

Author: ML Engineering Team
"""

from .handler import OutputHandler
from .excel_exporter import ExcelExporter
from .json_exporter import JSONExporter

__all__ = ['OutputHandler', 'ExcelExporter', 'JSONExporter']
