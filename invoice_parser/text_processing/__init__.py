"""
Text Processing Module for the OCR Invoice Parser.

This module turns a raw OCR text blob into normalized lines and tags
each line with the document sections it belongs to.
"""

from .line_normalizer import normalize_lines, join_lines
from .structure_analyzer import StructureAnalyzer, DocumentStructure, SECTIONS

__all__ = [
    'normalize_lines',
    'join_lines',
    'StructureAnalyzer',
    'DocumentStructure',
    'SECTIONS',
]
