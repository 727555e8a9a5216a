"""Reconciliation join engine.

Validation events drive the join: each validation row is looked up in a
ticket index (by user) and a service index (by run id), both built in full
before the first lookup. Field access on raw rows always goes through the
column resolver, so every "field absent" outcome is an explicit branch.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .cleaning.column_resolver import resolve_value
from .cleaning.dates import INVALID_DATE, normalize_date
from .cleaning.keys import normalize_run_id, normalize_user_id
from .cleaning.user_type import normalize_user_type
from .config import AFFIRMATIVE_TOKEN, UNKNOWN_ROUTE
from .errors import ReconciliationFailure
from .models import CombinedRecord, ValidationOutcome
from .transforms.utils import parse_int_prefix, parse_occupancy, text_or_none

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]

RECONCILIATION_FAILURE_REASON = (
    "No se pudieron combinar los datos. Verifique los formatos de fecha y las "
    "columnas clave ('ID salida', 'Usuario')."
)


def build_ticket_index(tickets: Sequence[Row]) -> Dict[str, List[Row]]:
    """Normalized user -> that user's ticket rows in input order.

    Only the first row per user is read by the join; multiple purchases are
    not summed.
    """
    index: Dict[str, List[Row]] = {}
    for ticket in tickets:
        user = normalize_user_id(resolve_value(ticket, "Usuario"))
        if user is None:
            continue
        index.setdefault(user, []).append(ticket)
    return index


def build_service_index(services: Sequence[Row]) -> Dict[str, Row]:
    """Trimmed run id -> last service row seen for it."""
    index: Dict[str, Row] = {}
    for service in services:
        run_id = normalize_run_id(resolve_value(service, "ID salida"))
        if run_id is None:
            continue
        index[run_id] = service
    return index


def _validation_outcome(value: Any) -> ValidationOutcome:
    text = "" if value is None else str(value)
    if text.lower() == AFFIRMATIVE_TOKEN:
        return ValidationOutcome.CONFIRMED
    return ValidationOutcome.NOT_CONFIRMED


def _route(service: Optional[Row], validation: Row) -> str:
    if service is not None:
        route = text_or_none(resolve_value(service, "Descripción de ruta"))
        if route is not None:
            return route
    route = text_or_none(resolve_value(validation, "Descripción de ruta"))
    if route is not None:
        return route
    return UNKNOWN_ROUTE


def join_validation(
    validation: Row,
    ticket_index: Mapping[str, List[Row]],
    service_index: Mapping[str, Row],
) -> Optional[CombinedRecord]:
    """Combined record for one validation row, or None when its date is unusable."""
    fecha = normalize_date(resolve_value(validation, "Fecha"))
    if fecha == INVALID_DATE:
        return None

    run_id = normalize_run_id(resolve_value(validation, "ID salida")) or ""
    user = normalize_user_id(resolve_value(validation, "Usuario")) or ""

    service = service_index.get(run_id) if run_id else None
    user_tickets = ticket_index.get(user) if user else None
    ticket = user_tickets[0] if user_tickets else None

    ocupacion: Optional[float] = None
    tickets_utilizados: Optional[int] = None
    if service is not None:
        ocupacion = parse_occupancy(resolve_value(service, "% Ocupación"))
        tickets_utilizados = parse_int_prefix(resolve_value(service, "Tickets utilizados")) or 0

    tipo_de_pase: Optional[str] = None
    tickets: Optional[int] = None
    if ticket is not None:
        tipo_de_pase = text_or_none(resolve_value(ticket, "Tipo de pase"))
        tickets = parse_int_prefix(resolve_value(ticket, "Tickets")) or 0

    return CombinedRecord(
        fecha=fecha,
        usuario=user,
        tipo_usuario=normalize_user_type(resolve_value(validation, "Tipo_usuario")),
        id_salida=run_id,
        descripcion_ruta=_route(service, validation),
        validado=_validation_outcome(resolve_value(validation, "Validado")),
        tipo_de_pase=tipo_de_pase,
        tickets=tickets,
        ocupacion=ocupacion,
        tickets_utilizados=tickets_utilizados,
    )


def reconcile_records(
    tickets: Sequence[Row],
    services: Sequence[Row],
    validations: Sequence[Row],
) -> List[CombinedRecord]:
    """Join every validation row against the ticket and service indexes.

    Rows with unparseable dates are dropped; unmatched rows are kept with
    empty cross-reference fields. Raises ReconciliationFailure when a
    non-empty validations dataset yields no record at all, or when services
    were provided but not a single record found its run.
    """
    ticket_index = build_ticket_index(tickets)
    service_index = build_service_index(services)
    logger.info(
        f"Indexes built: users={len(ticket_index)}, runs={len(service_index)}"
    )

    records: List[CombinedRecord] = []
    for validation in validations:
        record = join_validation(validation, ticket_index, service_index)
        if record is not None:
            records.append(record)

    if validations and not records:
        raise ReconciliationFailure(RECONCILIATION_FAILURE_REASON)

    # Individual misses are fine; no run id matching at all means the keys
    # of the two exports are in different formats.
    matched_runs = sum(1 for r in records if r.id_salida in service_index)
    if service_index and records and matched_runs == 0:
        raise ReconciliationFailure(RECONCILIATION_FAILURE_REASON)

    logger.info(
        f"Joined validations: rows={len(validations)}, records={len(records)}, "
        f"dropped={len(validations) - len(records)}, matched_runs={matched_runs}"
    )
    return records
