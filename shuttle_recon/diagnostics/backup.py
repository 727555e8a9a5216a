"""Raw-row retention for operator inspection when validation fails."""

from typing import Any, Dict, Mapping, Sequence

from ..models import BackupSnapshot


def capture_backup(datasets: Mapping[str, Sequence[Mapping[str, Any]]]) -> BackupSnapshot:
    """Keep every category that has rows, verbatim and in input order."""
    return BackupSnapshot(
        datasets={
            category: [dict(row) for row in rows]
            for category, rows in datasets.items()
            if rows
        }
    )
