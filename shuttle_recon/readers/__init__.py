"""Data readers for different file formats and sources."""

from .base import BaseReader, ReaderRegistry
from .csv_reader import CSVReader
from .excel_reader import ExcelReader

__all__ = [
    "BaseReader",
    "ReaderRegistry",
    "CSVReader",
    "ExcelReader",
    "FileSet",
    "read_rows",
    "registry",
]

# Register the built-in readers
registry = ReaderRegistry()
registry.register("csv", CSVReader)
registry.register("xlsx", ExcelReader)

from .fileset import FileSet  # noqa: E402


def read_rows(path: str):
    """Decode one file into raw rows with the default registry."""
    reader_class = registry.auto_detect_reader(path)
    if not reader_class:
        raise ValueError(f"No reader found for {path}")
    return reader_class().read_rows(path)
