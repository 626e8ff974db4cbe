"""
OCR Invoice Parser - Source Package.

This package turns the noisy OCR text of a scanned invoice into a
structured InvoiceRecord. Each module has a single responsibility.

Modules:
    - text_processing: line normalization and section analysis
    - extraction: field extractors and the pipeline orchestrator
    - postprocessor: amount/date normalization and reconciliation
    - models: the InvoiceRecord data classes
    - output_handler: JSON and Excel output
    - utils: logging, exceptions and file helpers

Architecture:
    OCR text → Normalize → Structure → Extract → Reconcile → Output
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'text_processing',
    'extraction',
    'postprocessor',
    'models',
    'output_handler',
    'utils'
]
