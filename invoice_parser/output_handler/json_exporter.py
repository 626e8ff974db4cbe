"""
JSON Exporter Module.

Writes one JSON document per invoice record. Key names and nesting
come from InvoiceRecord.to_dict() and are identical for every record.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union

from config import get_config
from invoice_parser.models import InvoiceRecord
from invoice_parser.utils.exceptions import JSONExportError
from invoice_parser.utils.helpers import ensure_directory, safe_filename
from invoice_parser.utils.logger import get_logger

logger = get_logger(__name__)


class JSONExporter:
    """
    Exports invoice records to JSON files.

    Example:
        >>> exporter = JSONExporter()
        >>> exporter.export(record, "outputs/scan_001.json")
        'outputs/scan_001.json'
    """

    def __init__(self, indent: Optional[int] = None) -> None:
        self.indent = indent if indent is not None else get_config("output.json.indent", 2)

    def export(self, record: InvoiceRecord, filepath: Union[str, Path]) -> str:
        """
        Write a single record.

        Args:
            record: Record to write.
            filepath: Target .json path.

        Returns:
            Path of the written file.

        Raises:
            JSONExportError: If the file cannot be written.
        """
        path = Path(filepath)
        try:
            ensure_directory(path.parent)
            path.write_text(record.to_json(indent=self.indent), encoding='utf-8')
        except OSError as e:
            raise JSONExportError(str(path), str(e))

        logger.debug(f"JSON record saved: {path}")
        return str(path)

    def export_many(
        self,
        records: Sequence[InvoiceRecord],
        output_dir: Union[str, Path],
        source_files: Optional[Sequence[str]] = None
    ) -> List[str]:
        """
        Write one JSON file per record.

        Files are named after the source file stem, or record_<n> when
        no source names are given.

        Returns:
            Paths of the written files.
        """
        paths = []
        for index, record in enumerate(records, 1):
            if source_files:
                stem = Path(source_files[index - 1]).stem
            else:
                stem = f"record_{index:03d}"
            filename = safe_filename(f"{stem}.json")
            paths.append(self.export(record, Path(output_dir) / filename))

        logger.info(f"Saved {len(paths)} JSON record(s) to {output_dir}")
        return paths
