import polars as pl
import pytest

from shuttle_recon.models import CombinedRecord, UserType, ValidationOutcome


@pytest.fixture
def ticket_row():
    return {
        "Fecha de compra": "2024-02-20",
        "Usuario": "a@x.com",
        "Tickets": 10,
        "Unnamed: 11": "Semestral",
    }


@pytest.fixture
def service_row():
    return {
        "ID salida": "S1",
        "Fecha": "01/03/2024",
        "Descripción de ruta": "R1",
        "Tickets utilizados": 5,
        "% Ocupación": "80%",
    }


@pytest.fixture
def validation_row():
    return {
        "ID salida": "S1",
        "Fecha": "01/03/2024",
        "Usuario": "A@X.com",
        "Tipo_usuario": "alumno",
        "Validado": "Sí",
    }


@pytest.fixture
def datasets(ticket_row, service_row, validation_row):
    return {
        "tickets": [ticket_row],
        "services": [service_row],
        "validations": [validation_row],
    }


def _make_record(**overrides) -> CombinedRecord:
    values = dict(
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
    values.update(overrides)
    return CombinedRecord(**values)


@pytest.fixture
def make_record():
    return _make_record


@pytest.fixture
def write_csv(tmp_path):
    """Write rows to a CSV file under tmp_path and return its path."""

    def _write(name, rows):
        path = tmp_path / name
        pl.DataFrame(rows).write_csv(path)
        return str(path)

    return _write
