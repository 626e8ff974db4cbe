"""
Invoice Text Extractor Module.

This module provides the InvoiceTextExtractor class that turns the raw
OCR text of one invoice into a structured InvoiceRecord.

Pipeline:
    normalize lines -> analyze structure -> basic info -> vendor ->
    customer -> financial -> payment -> line items -> reconcile ->
    locale

Every stage runs in its own try/except. A failing stage is logged and
the record keeps whatever the other stages extracted.

Author: ML Engineering Team
"""

import time
from typing import Optional

from invoice_parser.models import InvoiceRecord
from invoice_parser.postprocessor.reconciler import CrossFieldReconciler
from invoice_parser.text_processing import StructureAnalyzer, join_lines, normalize_lines
from invoice_parser.utils.logger import get_logger
from .basic_info import BasicInfoExtractor
from .customer import CustomerExtractor
from .financial import FinancialExtractor
from .line_items import LineItemBuilder
from .locale_detector import LocaleDetector
from .payment import PaymentExtractor
from .vendor import VendorExtractor

# Initialize module logger
logger = get_logger(__name__)


class InvoiceTextExtractor:
    """
    Heuristic OCR-text to InvoiceRecord extractor.

    Stages are plain objects and can be replaced through the
    constructor (e.g. a VendorExtractor with other legal suffixes).
    The extractor holds no per-document state, so one instance can be
    reused for any number of documents.

    Example:
        >>> extractor = InvoiceTextExtractor()
        >>> record = extractor.extract(ocr_text)
        >>> print(record.invoice_number)
        >>> print(record.financial.total_amount)
    """

    def __init__(
        self,
        structure_analyzer: Optional[StructureAnalyzer] = None,
        basic_info: Optional[BasicInfoExtractor] = None,
        vendor: Optional[VendorExtractor] = None,
        customer: Optional[CustomerExtractor] = None,
        financial: Optional[FinancialExtractor] = None,
        payment: Optional[PaymentExtractor] = None,
        line_items: Optional[LineItemBuilder] = None,
        reconciler: Optional[CrossFieldReconciler] = None,
        locale_detector: Optional[LocaleDetector] = None
    ) -> None:
        self.structure_analyzer = structure_analyzer or StructureAnalyzer()
        self.basic_info = basic_info or BasicInfoExtractor()
        self.vendor = vendor or VendorExtractor()
        self.customer = customer or CustomerExtractor()
        self.financial = financial or FinancialExtractor()
        self.payment = payment or PaymentExtractor()
        self.line_items = line_items or LineItemBuilder()
        self.reconciler = reconciler or CrossFieldReconciler()
        self.locale_detector = locale_detector or LocaleDetector()

        logger.debug("InvoiceTextExtractor initialized")

    def extract(self, text: Optional[str], source_file: Optional[str] = None) -> InvoiceRecord:
        """
        Extract a structured record from OCR text.

        This is the main extraction method. It never raises for bad
        content: missing fields stay None.

        Args:
            text: Raw OCR output of one invoice.
            source_file: Original filename, used for logging only.

        Returns:
            InvoiceRecord; empty when the text is None or blank.

        Example:
            >>> record = extractor.extract("Factuurnummer: F2024-0091")
            >>> record.invoice_number
            'F2024-0091'
        """
        start_time = time.time()
        record = InvoiceRecord()
        label = source_file or "<text>"

        lines = normalize_lines(text)
        if not lines:
            logger.info(f"No text to extract from: {label}")
            return record

        record.raw_text_lines = list(lines)
        full_text = join_lines(lines)
        structure = self.structure_analyzer.analyze(lines)

        stages = [
            ('basic info', self.basic_info),
            ('vendor', self.vendor),
            ('customer', self.customer),
            ('financial', self.financial),
            ('payment', self.payment),
            ('line items', self.line_items),
        ]

        for stage_name, stage in stages:
            try:
                stage.extract(record, lines, structure, full_text)
            except Exception as e:
                logger.warning(f"Error in {stage_name} stage for {label}: {e}")

        try:
            self.reconciler.apply(record)
        except Exception as e:
            logger.warning(f"Error in reconciliation for {label}: {e}")

        try:
            self.locale_detector.extract(record, full_text)
        except Exception as e:
            logger.warning(f"Error in locale detection for {label}: {e}")

        logger.info(
            f"Extraction complete for {label}: "
            f"{len(record.extracted_fields)}/{len(record.HEADER_FIELDS)} header fields, "
            f"{len(record.line_items)} line items, "
            f"total: {record.financial.total_amount}, "
            f"time: {time.time() - start_time:.3f}s"
        )
        return record
