"""
Utility Module for the OCR Invoice Parser.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Custom exceptions
    - File helpers
"""

from .logger import setup_logger, get_logger
from .helpers import (
    ensure_directory,
    get_file_extension,
    generate_timestamp,
    safe_filename,
    collect_input_files,
    read_text_file,
)

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'get_file_extension',
    'generate_timestamp',
    'safe_filename',
    'collect_input_files',
    'read_text_file',
]
