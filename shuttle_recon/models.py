"""Typed structures produced by the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

import polars as pl

Row = Mapping[str, Any]


class UserType(str, Enum):
    STUDENT = "Estudiante"
    STAFF = "Colaborador"
    UNKNOWN = "Desconocido"


class ValidationOutcome(str, Enum):
    CONFIRMED = "Sí"
    NOT_CONFIRMED = "No"


@dataclass(frozen=True)
class CombinedRecord:
    """One ride validation joined against its service run and the rider's ticket."""

    fecha: str
    usuario: str
    tipo_usuario: UserType
    id_salida: str
    descripcion_ruta: str
    validado: ValidationOutcome
    tipo_de_pase: Optional[str] = None
    tickets: Optional[int] = None
    ocupacion: Optional[float] = None
    tickets_utilizados: Optional[int] = None

    @property
    def year(self) -> int:
        return int(self.fecha[0:4])

    @property
    def month(self) -> int:
        return int(self.fecha[5:7])

    @property
    def day(self) -> int:
        return int(self.fecha[8:10])

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["tipo_usuario"] = self.tipo_usuario.value
        data["validado"] = self.validado.value
        return data


@dataclass(frozen=True)
class KpiSummary:
    total_tickets: int = 0
    total_estudiantes: int = 0
    total_colaboradores: int = 0
    pases_semestrales: int = 0
    pases_semanales: int = 0
    pases_redondos: int = 0
    pases_verano: int = 0
    pases_mensual_colaborador: int = 0
    pases_especiales: int = 0
    pases_invitado: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class BackupSnapshot:
    """Raw rows per category, kept verbatim for operator inspection."""

    datasets: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)

    def categories(self) -> List[str]:
        return list(self.datasets.keys())

    def preview(self, category: str, limit: int = 100) -> tuple[pl.DataFrame, int]:
        """First `limit` rows of a category as a text frame, plus the total row count.

        Headers come from the first row, as the backup tables show them.
        """
        rows = self.datasets.get(category) or []
        if not rows:
            return pl.DataFrame(), 0
        headers = list(rows[0].keys())
        data = {
            h: ["" if row.get(h) is None else str(row.get(h)) for row in rows[:limit]]
            for h in headers
        }
        return pl.DataFrame(data, schema={h: pl.Utf8 for h in headers}), len(rows)


@dataclass
class FilterSpec:
    year: str = "all"
    month: str = "all"
    user_type: str = "Todos"


@dataclass
class FilteredView:
    records: List[CombinedRecord]
    kpis: KpiSummary


@dataclass
class PipelineOutput:
    """Everything the presentation layer consumes from one pipeline run."""

    combined_records: Optional[List[CombinedRecord]] = None
    kpis: Optional[KpiSummary] = None
    available_years: List[str] = field(default_factory=list)
    available_months: List[str] = field(default_factory=list)
    tickets_sold: int = 0
    file_errors: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    backup: Optional[BackupSnapshot] = None

    @property
    def ok(self) -> bool:
        return self.error_message is None
