"""
Excel Exporter Module.

This module provides Excel file generation for parsed invoice records.
Uses openpyxl for modern Excel format support.

Features:
    - Summary sheet (one row per invoice)
    - Line items sheet (one row per item)
    - Formatted headers, auto column width, frozen header row
    - Invoice and due dates written as real Excel dates

Author: ML Engineering Team
"""

from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from config import get_config
from invoice_parser.models import InvoiceRecord
from invoice_parser.postprocessor.normalizers import DateNormalizer
from invoice_parser.utils.exceptions import ExcelExportError
from invoice_parser.utils.helpers import ensure_directory, generate_timestamp
from invoice_parser.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

DATE_FORMAT = 'DD-MM-YYYY'
AMOUNT_FORMAT = '#,##0.00'
MAX_COLUMN_WIDTH = 50


def _cell_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


class ExcelExporter:
    """
    Exports invoice records to Excel format.

    Attributes:
        output_dir: Directory for output files
        sheet_name: Title of the summary sheet

    Example:
        >>> exporter = ExcelExporter()
        >>> filepath = exporter.export(records, "invoices.xlsx")
        >>> print(f"Saved to: {filepath}")
    """

    SUMMARY_COLUMNS: List[Tuple[str, Callable[[InvoiceRecord], Any]]] = [
        ('Invoice Number', lambda r: r.invoice_number),
        ('Invoice Date', lambda r: r.invoice_date),
        ('Due Date', lambda r: r.due_date),
        ('Order Number', lambda r: r.order_number),
        ('Vendor', lambda r: r.vendor.company_name),
        ('Vendor VAT', lambda r: r.vendor.vat_number),
        ('Vendor IBAN', lambda r: r.vendor.iban),
        ('Customer', lambda r: r.customer.company_name),
        ('Customer Number', lambda r: r.customer.customer_number),
        ('Subtotal', lambda r: r.financial.subtotal),
        ('Tax Rate (%)', lambda r: r.financial.tax_rate),
        ('Tax Amount', lambda r: r.financial.tax_amount),
        ('Total Amount', lambda r: r.financial.total_amount),
        ('Currency', lambda r: r.currency),
        ('Language', lambda r: r.language),
        ('Payment Terms', lambda r: r.payment.payment_terms),
        ('Line Items', lambda r: len(r.line_items)),
    ]

    ITEM_COLUMNS = [
        ('Description', 'description'),
        ('Product Code', 'product_code'),
        ('Quantity', 'quantity'),
        ('Unit', 'unit'),
        ('Unit Price', 'unit_price'),
        ('Tax Rate (%)', 'tax_rate'),
        ('Line Total', 'line_total'),
    ]

    DATE_COLUMNS = ('Invoice Date', 'Due Date')
    AMOUNT_COLUMNS = ('Subtotal', 'Tax Amount', 'Total Amount', 'Unit Price', 'Line Total')

    def __init__(
        self,
        output_dir: Optional[str] = None,
        sheet_name: Optional[str] = None
    ) -> None:
        """Initialize the Excel exporter with configuration."""
        self.output_dir = Path(output_dir or get_config("paths.output_dir", "outputs"))
        self.sheet_name = sheet_name or get_config("output.excel.sheet_name", "Invoices")
        self.date_normalizer = DateNormalizer()

        # Styles
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center")
        self.thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        logger.debug(f"ExcelExporter initialized (output_dir: {self.output_dir})")

    def export(
        self,
        records: Union[InvoiceRecord, Sequence[InvoiceRecord]],
        filename: Optional[str] = None,
        output_dir: Optional[str] = None,
        source_files: Optional[Sequence[str]] = None
    ) -> str:
        """
        Export invoice records to an Excel file.

        Args:
            records: Single record or list of records to export.
            filename: Output filename. If None, auto-generated.
            output_dir: Output directory. If None, uses configured dir.
            source_files: Source file names, parallel to records.

        Returns:
            Path to the created Excel file.

        Raises:
            ExcelExportError: If export fails.
        """
        if isinstance(records, InvoiceRecord):
            records = [records]

        out_dir = Path(output_dir) if output_dir else self.output_dir
        filepath = out_dir / (filename or self.get_default_filename())

        if not records:
            raise ExcelExportError(str(filepath), "No records to export")

        sources = list(source_files) if source_files else [None] * len(records)

        try:
            ensure_directory(out_dir)

            workbook = Workbook()
            self._create_summary_sheet(workbook, records, sources)
            self._create_items_sheet(workbook, records, sources)
            workbook.save(filepath)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Excel export failed: {e}")
            raise ExcelExportError(str(filepath), str(e))

        logger.info(f"Excel file saved: {filepath} ({len(records)} records)")
        return str(filepath)

    def _create_summary_sheet(
        self,
        workbook: Workbook,
        records: Sequence[InvoiceRecord],
        sources: List[Optional[str]]
    ) -> None:
        sheet = workbook.active
        sheet.title = self.sheet_name

        headers = ['Source File'] + [name for name, _ in self.SUMMARY_COLUMNS]
        self._write_header(sheet, headers)

        for row_num, (record, source) in enumerate(zip(records, sources), 2):
            self._write_cell(sheet, row_num, 1, 'Source File', source)
            for col, (header, getter) in enumerate(self.SUMMARY_COLUMNS, 2):
                self._write_cell(sheet, row_num, col, header, getter(record))

        self._finish_sheet(sheet, len(headers))

    def _create_items_sheet(
        self,
        workbook: Workbook,
        records: Sequence[InvoiceRecord],
        sources: List[Optional[str]]
    ) -> None:
        sheet = workbook.create_sheet(title="Line Items")

        headers = ['Source File', 'Invoice Number'] + [name for name, _ in self.ITEM_COLUMNS]
        self._write_header(sheet, headers)

        row_num = 2
        for record, source in zip(records, sources):
            for item in record.line_items:
                self._write_cell(sheet, row_num, 1, 'Source File', source)
                self._write_cell(sheet, row_num, 2, 'Invoice Number', record.invoice_number)
                for col, (header, field_name) in enumerate(self.ITEM_COLUMNS, 3):
                    self._write_cell(sheet, row_num, col, header, getattr(item, field_name))
                row_num += 1

        self._finish_sheet(sheet, len(headers))

    def _write_header(self, sheet, headers: List[str]) -> None:
        for col, header_name in enumerate(headers, 1):
            cell = sheet.cell(row=1, column=col, value=header_name)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_alignment
            cell.border = self.thin_border

    def _write_cell(self, sheet, row: int, col: int, header: str, value: Any) -> None:
        """Write one data cell, converting dates and amounts."""
        if header in self.DATE_COLUMNS and value:
            parsed = self.date_normalizer.to_date(value)
            if parsed is not None:
                value = parsed

        cell = sheet.cell(row=row, column=col, value=_cell_value(value))
        cell.border = self.thin_border

        if header in self.DATE_COLUMNS and cell.value is not None and not isinstance(cell.value, str):
            cell.number_format = DATE_FORMAT
        elif header in self.AMOUNT_COLUMNS and cell.value is not None:
            cell.number_format = AMOUNT_FORMAT

    def _finish_sheet(self, sheet, column_count: int) -> None:
        """Adjust column widths and freeze the header row."""
        for col in range(1, column_count + 1):
            column_letter = get_column_letter(col)

            max_length = 0
            for row in range(1, sheet.max_row + 1):
                cell_value = sheet.cell(row=row, column=col).value
                if cell_value is not None:
                    max_length = max(max_length, len(str(cell_value)))

            sheet.column_dimensions[column_letter].width = min(max_length + 2, MAX_COLUMN_WIDTH)

        sheet.freeze_panes = 'A2'

    def get_default_filename(self) -> str:
        """
        Generate a default filename with timestamp.

        Returns:
            Default filename string.
        """
        timestamp = generate_timestamp()
        pattern = get_config(
            "output.excel.filename_pattern",
            "invoice_records_{timestamp}.xlsx"
        )
        return pattern.format(timestamp=timestamp)
