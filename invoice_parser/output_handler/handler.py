"""
Main Output Handler Module.

This module provides the unified OutputHandler class that coordinates
all output operations (JSON records and the Excel workbook).

Author: ML Engineering Team
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from config import get_config
from invoice_parser.models import InvoiceRecord
from invoice_parser.utils.exceptions import OutputError
from invoice_parser.utils.logger import get_logger
from .excel_exporter import ExcelExporter
from .json_exporter import JSONExporter

# Initialize module logger
logger = get_logger(__name__)


class OutputHandler:
    """
    Unified output handler for parsed invoice records.

    Coordinates output to per-invoice JSON files and a single Excel
    workbook. Either output can be switched off.

    Attributes:
        json_enabled: Whether JSON export is enabled
        excel_enabled: Whether Excel export is enabled
        output_dir: Directory all outputs are written to

    Example:
        >>> handler = OutputHandler()
        >>> info = handler.save(records, source_files=["scan_001.txt"])
        >>> print(info['excel_path'])
    """

    def __init__(
        self,
        json_enabled: Optional[bool] = None,
        excel_enabled: Optional[bool] = None,
        output_dir: Optional[str] = None
    ) -> None:
        """
        Initialize the output handler.

        Args:
            json_enabled: Override config for JSON output.
            excel_enabled: Override config for Excel output.
            output_dir: Override the configured output directory.
        """
        self.json_enabled = json_enabled if json_enabled is not None else \
            get_config("output.json.enabled", True)
        self.excel_enabled = excel_enabled if excel_enabled is not None else \
            get_config("output.excel.enabled", True)
        self.output_dir = Path(output_dir or get_config("paths.output_dir", "outputs"))

        # Exporters are created on first use
        self._json_exporter = None
        self._excel_exporter = None

        logger.debug(
            f"OutputHandler initialized "
            f"(json={self.json_enabled}, excel={self.excel_enabled})"
        )

    @property
    def json_exporter(self) -> JSONExporter:
        """Get or create the JSON exporter."""
        if self._json_exporter is None:
            self._json_exporter = JSONExporter()
        return self._json_exporter

    @property
    def excel_exporter(self) -> ExcelExporter:
        """Get or create the Excel exporter."""
        if self._excel_exporter is None:
            self._excel_exporter = ExcelExporter(output_dir=str(self.output_dir))
        return self._excel_exporter

    def save(
        self,
        records: Union[InvoiceRecord, Sequence[InvoiceRecord]],
        source_files: Optional[Sequence[str]] = None,
        excel_filename: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Save records to all enabled outputs.

        A failing output is logged and reported in the returned
        dictionary; the other output is still written.

        Args:
            records: Single record or list of records.
            source_files: Source file names, parallel to records.
            excel_filename: Custom Excel filename (optional).

        Returns:
            Dictionary with output details:
            {
                'json_paths': ['outputs/scan_001.json'],
                'excel_path': 'outputs/invoice_records_....xlsx',
                'errors': []
            }
        """
        if isinstance(records, InvoiceRecord):
            records = [records]

        output_info = {
            'json_paths': [],
            'excel_path': None,
            'errors': []
        }

        if not records:
            logger.warning("No records to save")
            return output_info

        if self.json_enabled:
            try:
                output_info['json_paths'] = self.to_json(records, source_files)
            except OutputError as e:
                logger.error(f"JSON export failed: {e}")
                output_info['errors'].append(str(e))

        if self.excel_enabled:
            try:
                output_info['excel_path'] = self.to_excel(records, excel_filename, source_files)
            except OutputError as e:
                logger.error(f"Excel export failed: {e}")
                output_info['errors'].append(str(e))

        return output_info

    def to_json(
        self,
        records: Sequence[InvoiceRecord],
        source_files: Optional[Sequence[str]] = None
    ) -> List[str]:
        """Write one JSON file per record into the output directory."""
        return self.json_exporter.export_many(records, self.output_dir, source_files)

    def to_excel(
        self,
        records: Sequence[InvoiceRecord],
        filename: Optional[str] = None,
        source_files: Optional[Sequence[str]] = None
    ) -> str:
        """
        Export records to an Excel workbook.

        Returns:
            Path to created Excel file.
        """
        return self.excel_exporter.export(
            records, filename, str(self.output_dir), source_files
        )
