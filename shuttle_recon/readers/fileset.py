"""Named input files per dataset category.

A file is identified by its name within a category: adding a file with a
name that is already loaded replaces it in place. A file that cannot be
read is recorded in `errors` and leaves the other files untouched.
"""

import logging
import os
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..config import CATEGORIES, CATEGORY_FILE_PREFIXES, CATEGORY_LABELS, normalize_category
from ..errors import FileReadError
from .base import ReaderRegistry

logger = logging.getLogger(__name__)


class FileSet:
    """Raw rows of every loaded file, grouped by category."""

    def __init__(self, registry: Optional[ReaderRegistry] = None, check_names: bool = True):
        if registry is None:
            from . import registry as default_registry

            registry = default_registry
        self.registry = registry
        self.check_names = check_names
        self._files: Dict[str, Dict[str, List[Dict[str, Any]]]] = {c: {} for c in CATEGORIES}
        self.errors: List[FileReadError] = []

    def _name_matches(self, name: str, category: str) -> bool:
        return name.lower().startswith(CATEGORY_FILE_PREFIXES[category])

    def _store(self, category: str, name: str, rows: List[Dict[str, Any]]) -> None:
        action = "replaced" if name in self._files[category] else "loaded"
        self._files[category][name] = rows
        logger.info(f"[{category}] {action} \"{name}\": rows={len(rows)}")

    def _fail(self, path: str, reason: str) -> bool:
        error = FileReadError(path, reason)
        self.errors.append(error)
        logger.warning(str(error))
        return False

    def add_file(self, path: str, category: str, name: Optional[str] = None) -> bool:
        """Read `path` into `category`. Returns False (and records the error) on failure."""
        category = normalize_category(category)
        name = name or os.path.basename(path)

        if self.check_names and not self._name_matches(name, category):
            return self._fail(path, f"El archivo no parece ser un archivo de {CATEGORY_LABELS[category]}.")

        reader_class = self.registry.auto_detect_reader(path)
        if reader_class is None:
            return self._fail(path, "Formato de archivo no soportado.")

        try:
            rows = reader_class().read_rows(path)
        except Exception as e:
            return self._fail(path, str(e))

        self._store(category, name, rows)
        return True

    def add_rows(self, name: str, category: str, rows: Sequence[Mapping[str, Any]]) -> None:
        """Register already-decoded rows (e.g. from a JSON request) under `name`."""
        category = normalize_category(category)
        self._store(category, name, [dict(r) for r in rows])

    def remove(self, name: str, category: str) -> bool:
        category = normalize_category(category)
        removed = self._files[category].pop(name, None) is not None
        if removed:
            logger.info(f"[{category}] removed \"{name}\"")
        return removed

    def file_names(self, category: str) -> List[str]:
        return list(self._files[normalize_category(category)].keys())

    def has_data(self) -> bool:
        return any(self._files[c] for c in CATEGORIES)

    def datasets(self) -> Dict[str, List[Dict[str, Any]]]:
        """All rows per category, files concatenated in load order."""
        return {
            category: [row for rows in files.values() for row in rows]
            for category, files in self._files.items()
        }
