import logging

import polars as pl
import pytest
from polars.testing import assert_frame_equal

from shuttle_recon import (
    KpiSummary,
    PipelineOutput,
    ReconciliationFailure,
    SchemaMismatch,
    ShuttleDataProcessor,
    reconcile,
    run_pipeline,
)
from shuttle_recon.finalize import finalize_output, finalize_records
from shuttle_recon.models import UserType, ValidationOutcome
from shuttle_recon.reconcile import RECONCILIATION_FAILURE_REASON

# --- End-to-end over in-memory rows ---


def test_end_to_end_scenario(datasets):
    output = reconcile(datasets)

    assert output.ok
    (record,) = output.combined_records
    assert record.fecha == "2024-03-01"
    assert record.usuario == "a@x.com"
    assert record.tipo_usuario is UserType.STUDENT
    assert record.descripcion_ruta == "R1"
    assert record.validado is ValidationOutcome.CONFIRMED
    assert record.ocupacion == 0.8
    assert record.tickets_utilizados == 5
    assert record.tipo_de_pase == "Semestral"
    assert record.tickets == 10

    assert output.kpis == KpiSummary(total_tickets=1, total_estudiantes=1, pases_semestrales=1)
    assert output.available_years == ["2024"]
    assert output.available_months == ["3"]
    assert output.tickets_sold == 10


def test_spanish_category_names(ticket_row, service_row, validation_row):
    output = reconcile(
        {"tickets": [ticket_row], "servicios": [service_row], "validaciones": [validation_row]}
    )
    assert len(output.combined_records) == 1


def test_missing_categories_count_as_empty(validation_row):
    output = reconcile({"validations": [validation_row]})
    assert len(output.combined_records) == 1
    assert output.tickets_sold == 0


def test_no_data_gives_empty_output():
    output = reconcile({"tickets": [], "services": []})
    assert output == PipelineOutput()
    assert output.combined_records is None


def test_unknown_category_is_rejected(validation_row):
    with pytest.raises(ValueError):
        reconcile({"pagos": [validation_row]})


def test_reconcile_raises_schema_mismatch(datasets, service_row):
    datasets["services"] = [{k: v for k, v in service_row.items() if k != "% Ocupación"}]
    with pytest.raises(SchemaMismatch) as excinfo:
        reconcile(datasets)
    assert excinfo.value.category == "services"
    assert excinfo.value.missing_columns == ["% Ocupación"]


# --- Operator-facing outcomes ---


def test_run_pipeline_schema_mismatch_keeps_backup(datasets):
    datasets["validations"] = [{"Usuario": "a@x.com"}]
    output = run_pipeline(datasets)

    assert not output.ok
    assert output.combined_records is None
    assert output.error_message == (
        "Error en archivo de validaciones: Faltan columnas: ID salida, Fecha, Tipo_usuario, Validado."
    )
    assert output.backup.categories() == ["tickets", "services", "validations"]
    # raw rows, before the ticket header fixes
    assert "Unnamed: 11" in output.backup.datasets["tickets"][0]

    preview, total = output.backup.preview("validations")
    assert total == 1
    assert_frame_equal(preview, pl.DataFrame({"Usuario": ["a@x.com"]}))


def test_run_pipeline_reconciliation_failure(datasets, validation_row):
    datasets["validations"] = [dict(validation_row, **{"ID salida": "S9"})]
    output = run_pipeline(datasets)
    assert output.error_message == RECONCILIATION_FAILURE_REASON
    assert output.backup is None


def test_reconcile_raises_reconciliation_failure(datasets, validation_row):
    datasets["validations"] = [dict(validation_row, Fecha="sin fecha")]
    with pytest.raises(ReconciliationFailure):
        reconcile(datasets)


def test_diagnostics_can_be_switched_off(datasets, monkeypatch, caplog):
    caplog.set_level(logging.INFO)
    monkeypatch.setenv("PROCESSOR_DIAG", "1")
    reconcile(datasets)
    assert "Join coverage" in caplog.text

    caplog.clear()
    monkeypatch.setenv("PROCESSOR_DIAG", "0")
    reconcile(datasets)
    assert "Join coverage" not in caplog.text


# --- Files through the processor ---


def test_process_files(write_csv, ticket_row, service_row, validation_row, tmp_path):
    broken = tmp_path / "servicios_rotos.xlsx"
    broken.write_bytes(b"garbage")
    paths = {
        "tickets": [write_csv("tickets.csv", [ticket_row])],
        "servicios": [write_csv("servicios.csv", [service_row]), str(broken)],
        "validaciones": write_csv("validaciones.csv", [validation_row]),
    }

    processor = ShuttleDataProcessor()
    output = processor.process_files(paths)

    assert output.ok
    assert len(output.combined_records) == 1
    assert output.combined_records[0].ocupacion == 0.8
    assert len(output.file_errors) == 1
    assert "servicios_rotos.xlsx" in output.file_errors[0]

    analysis = processor.analyze(output.combined_records)
    assert analysis["kpis"]["total_estudiantes"] == 1


# --- Finalized frame ---


def test_finalize_records(datasets):
    output = reconcile(datasets)
    expected = pl.DataFrame(
        {
            "Fecha": ["2024-03-01"],
            "Usuario": ["a@x.com"],
            "Tipo_usuario": ["Estudiante"],
            "ID salida": ["S1"],
            "Descripcion ruta": ["R1"],
            "Validado": ["Sí"],
            "% Ocupacion": [0.8],
            "Tickets utilizados": [5],
            "Tipo de pase": ["Semestral"],
            "Tickets": [10],
        }
    )
    assert_frame_equal(finalize_records(output.combined_records), expected)


def test_finalize_output_requires_every_column():
    with pytest.raises(pl.exceptions.ColumnNotFoundError):
        finalize_output(pl.DataFrame({"fecha": ["2024-03-01"]}))


# --- Command line ---


def test_process_data_files_writes_analysis(write_csv, ticket_row, service_row, validation_row, tmp_path):
    import json

    from main import process_data_files

    paths = {
        "tickets": [write_csv("tickets.csv", [ticket_row])],
        "services": [write_csv("servicios.csv", [service_row])],
        "validations": [write_csv("validaciones.csv", [validation_row])],
    }
    analysis_path = tmp_path / "analysis.json"

    output = process_data_files(paths, analysis_path=str(analysis_path))

    assert output.ok
    analysis = json.loads(analysis_path.read_text(encoding="utf-8"))
    assert analysis["route_performance"][0]["descripcion_ruta"] == "R1"
    assert analysis["top_users"] == [{"usuario": "a@x.com", "viajes": 1}]
    assert analysis["usage_by_day"]["1"] == 1
