"""Base reader interface and registry."""

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

import polars as pl

logger = logging.getLogger(__name__)


class BaseReader(ABC):
    """Base interface for all data readers.

    Readers return every cell as text (or null), the way a formatted-text
    spreadsheet export would, so dates and ids are never reinterpreted here.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    @abstractmethod
    def read(self, path: str, **kwargs) -> pl.DataFrame:
        """Read data from file and return DataFrame."""
        pass

    def read_rows(self, path: str, **kwargs) -> List[Dict[str, Any]]:
        """Read the file as a list of header -> value mappings."""
        return self.read(path, **kwargs).to_dicts()


class ReaderRegistry:
    """Registry for file readers."""

    EXTENSION_MAP = {
        ".csv": "csv",
        ".txt": "csv",  # TXT treated as CSV
        ".xlsx": "xlsx",
        ".xls": "xlsx",
    }

    def __init__(self):
        self._readers: Dict[str, Type[BaseReader]] = {}

    def register(self, file_type: str, reader_class: Type[BaseReader]):
        """Register a reader for specific file type."""
        self._readers[file_type] = reader_class

    def auto_detect_reader(self, path: str) -> Optional[Type[BaseReader]]:
        """Pick a reader from the file extension.

        Handles polluted names like 'file.xlsx~extra' by accepting an extension
        followed by a dot, space, tilde or the end of the name.
        """
        basename = os.path.basename(path).lower()
        for ext, key in self.EXTENSION_MAP.items():
            pos = basename.find(ext)
            while pos != -1:
                end = pos + len(ext)
                if end >= len(basename) or basename[end] in " .~":
                    return self._readers.get(key)
                pos = basename.find(ext, pos + 1)
        logger.warning(f"No reader registered for {path}")
        return None
