"""Final output column naming (display names used by the dashboard)."""

from __future__ import annotations

from typing import Any, Sequence

from ..models import CombinedRecord

# Map internal standardized names -> display names
OUTPUT_NAME_MAP: dict[str, str] = {
    "fecha": "Fecha",
    "usuario": "Usuario",
    "tipo_usuario": "Tipo_usuario",
    "id_salida": "ID salida",
    "descripcion_ruta": "Descripcion ruta",
    "validado": "Validado",
    "ocupacion": "% Ocupacion",
    "tickets_utilizados": "Tickets utilizados",
    "tipo_de_pase": "Tipo de pase",
    "tickets": "Tickets",
}

OUTPUT_ORDER: list[str] = list(OUTPUT_NAME_MAP.keys())


def record_to_output(record: CombinedRecord) -> dict[str, Any]:
    data = record.to_dict()
    return {OUTPUT_NAME_MAP[k]: data[k] for k in OUTPUT_ORDER}


def records_to_output(records: Sequence[CombinedRecord]) -> list[dict[str, Any]]:
    return [record_to_output(r) for r in records]
