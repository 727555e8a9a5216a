import pytest

from shuttle_recon.errors import ReconciliationFailure
from shuttle_recon.models import CombinedRecord, UserType, ValidationOutcome
from shuttle_recon.reconcile import (
    RECONCILIATION_FAILURE_REASON,
    build_service_index,
    build_ticket_index,
    reconcile_records,
)
from shuttle_recon.transforms import TicketsTransform


def _tickets(*rows):
    return TicketsTransform().transform(list(rows))


def test_single_row_scenario(ticket_row, service_row, validation_row):
    records = reconcile_records(_tickets(ticket_row), [service_row], [validation_row])

    assert records == [
        CombinedRecord(
            fecha="2024-03-01",
            usuario="a@x.com",
            tipo_usuario=UserType.STUDENT,
            id_salida="S1",
            descripcion_ruta="R1",
            validado=ValidationOutcome.CONFIRMED,
            tipo_de_pase="Semestral",
            tickets=10,
            ocupacion=0.8,
            tickets_utilizados=5,
        )
    ]


def test_unmatched_run_is_kept_with_empty_service_fields(service_row, validation_row):
    other = dict(validation_row, **{"ID salida": "S2", "Descripción de ruta": "R9"})
    records = reconcile_records([], [service_row], [validation_row, other])

    assert len(records) == 2
    unmatched = records[1]
    assert unmatched.id_salida == "S2"
    assert unmatched.ocupacion is None
    assert unmatched.tickets_utilizados is None
    assert unmatched.descripcion_ruta == "R9"
    assert unmatched.tipo_de_pase is None
    assert unmatched.tickets is None


def test_unknown_route_marker(service_row, validation_row):
    other = dict(validation_row, **{"ID salida": "S2"})
    records = reconcile_records([], [service_row], [validation_row, other])
    assert records[1].descripcion_ruta == "N/A"


def test_invalid_dates_are_dropped(service_row, validation_row):
    bad = dict(validation_row, Fecha="no es fecha")
    records = reconcile_records([], [service_row], [validation_row, bad, validation_row])
    assert len(records) == 2


def test_zero_run_intersection_raises(service_row, validation_row):
    stray = dict(validation_row, **{"ID salida": "S9"})
    with pytest.raises(ReconciliationFailure) as excinfo:
        reconcile_records([], [service_row], [stray])
    assert excinfo.value.reason == RECONCILIATION_FAILURE_REASON


def test_all_dates_invalid_raises(validation_row):
    with pytest.raises(ReconciliationFailure):
        reconcile_records([], [], [dict(validation_row, Fecha="??")])


def test_no_services_keeps_records(validation_row):
    records = reconcile_records([], [], [validation_row])
    assert len(records) == 1
    assert records[0].ocupacion is None
    assert records[0].descripcion_ruta == "N/A"


def test_empty_validations_gives_no_records(service_row):
    assert reconcile_records([], [service_row], []) == []


def test_service_index_last_write_wins(service_row):
    later = dict(service_row, **{"Descripción de ruta": "R2"})
    blank = dict(service_row, **{"ID salida": "  "})
    index = build_service_index([service_row, later, blank])
    assert list(index) == ["S1"]
    assert index["S1"]["Descripción de ruta"] == "R2"


def test_ticket_index_picks_first_ticket(ticket_row, service_row, validation_row):
    second = dict(ticket_row, Tickets=3, **{"Unnamed: 11": "Semanal"})
    tickets = _tickets(ticket_row, second)

    index = build_ticket_index(tickets)
    assert len(index["a@x.com"]) == 2

    (record,) = reconcile_records(tickets, [service_row], [validation_row])
    assert record.tickets == 10
    assert record.tipo_de_pase == "Semestral"


def test_blank_service_values_default_to_zero(service_row, validation_row):
    service = dict(service_row, **{"% Ocupación": "", "Tickets utilizados": "n/d"})
    (record,) = reconcile_records([], [service], [validation_row])
    assert record.ocupacion == 0.0
    assert record.tickets_utilizados == 0


@pytest.mark.parametrize(
    "token, expected",
    [
        ("Sí", ValidationOutcome.CONFIRMED),
        ("SÍ", ValidationOutcome.CONFIRMED),
        ("si", ValidationOutcome.NOT_CONFIRMED),
        ("No", ValidationOutcome.NOT_CONFIRMED),
        ("", ValidationOutcome.NOT_CONFIRMED),
    ],
)
def test_validation_outcome(token, expected, service_row, validation_row):
    (record,) = reconcile_records([], [service_row], [dict(validation_row, Validado=token)])
    assert record.validado is expected


def test_aliased_headers_join(ticket_row, validation_row):
    service = {
        "Id de salida": " S1 ",
        "Fecha": "2024-03-01",
        "descripcion ruta": "Campus Norte",
        "Tickets utilizados": "7",
        "Ocupacion": "45%",
    }
    ticket = {"Fecha": "2024-02-01", "Email": " A@x.COM", "Tickets": "4", "Tipo de pase": "Redondo"}
    (record,) = reconcile_records([ticket], [service], [validation_row])
    assert record.descripcion_ruta == "Campus Norte"
    assert record.tickets_utilizados == 7
    assert record.ocupacion == pytest.approx(0.45)
    assert record.tickets == 4
    assert record.tipo_de_pase == "Redondo"
