"""
Helper Utilities Module.

Generic file and naming helpers used by the CLI and the output handler.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - generate_timestamp: Generate formatted timestamps
    - safe_filename: Sanitize filenames for filesystem
    - collect_input_files: Resolve a file or directory into OCR text files
    - read_text_file: Read an OCR text dump
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Union

from .exceptions import InputFileNotFoundError, UnsupportedFileTypeError

SUPPORTED_TEXT_EXTENSIONS = ('.txt',)


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/records")
        PosixPath('outputs/records')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the lowercase file extension (including the dot).

    Example:
        >>> get_file_extension("scan_001.TXT")
        '.txt'
    """
    return Path(filepath).suffix.lower()


def generate_timestamp(format_str: str = "%Y%m%d_%H%M%S") -> str:
    """
    Generate a formatted timestamp string.

    Args:
        format_str: strftime format string.

    Returns:
        Formatted timestamp string.
    """
    return datetime.now().strftime(format_str)


def safe_filename(filename: str, replacement: str = "_") -> str:
    """
    Sanitize a filename by removing or replacing invalid characters.

    Args:
        filename: Original filename.
        replacement: Character to replace invalid characters with.

    Returns:
        Sanitized filename safe for filesystem.

    Example:
        >>> safe_filename("invoice:F2024/0091.json")
        'invoice_F2024_0091.json'
    """
    # Characters not allowed in Windows filenames
    invalid_chars = r'[<>:"/\\|?*\x00-\x1f]'
    sanitized = re.sub(invalid_chars, replacement, filename)
    sanitized = sanitized.strip('. ')

    if not sanitized:
        sanitized = "unnamed"

    return sanitized


def collect_input_files(
    path: Union[str, Path],
    extensions: Iterable[str] = SUPPORTED_TEXT_EXTENSIONS
) -> List[Path]:
    """
    Resolve an input path into a sorted list of OCR text files.

    Args:
        path: A single text file or a directory containing text files.
        extensions: Accepted file extensions.

    Returns:
        Sorted list of file paths.

    Raises:
        InputFileNotFoundError: If the path does not exist.
        UnsupportedFileTypeError: If a single file has the wrong extension.
    """
    input_path = Path(path)
    extensions = tuple(extensions)

    if not input_path.exists():
        raise InputFileNotFoundError(str(input_path))

    if input_path.is_file():
        if get_file_extension(input_path) not in extensions:
            raise UnsupportedFileTypeError(input_path.suffix, list(extensions))
        return [input_path]

    return sorted(
        p for p in input_path.iterdir()
        if p.is_file() and get_file_extension(p) in extensions
    )


def read_text_file(path: Union[str, Path]) -> str:
    """
    Read an OCR text dump, tolerating undecodable bytes.

    Args:
        path: Path to the text file.

    Returns:
        File content as a string.
    """
    return Path(path).read_text(encoding='utf-8', errors='replace')
