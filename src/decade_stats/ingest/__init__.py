"""Ingestion: price file discovery and row parsing."""

from .file_scanner import FileScanner, DataFile, DirectoryError
from .csv_reader import (
    CsvReader,
    FileOpenError,
    parse_lines,
    validate_rows,
    empty_row_frame,
)

__all__ = [
    "FileScanner",
    "DataFile",
    "DirectoryError",
    "CsvReader",
    "FileOpenError",
    "parse_lines",
    "validate_rows",
    "empty_row_frame",
]
