import math
from datetime import date, datetime

import pytest

from shuttle_recon.cleaning import (
    INVALID_DATE,
    normalize_date,
    normalize_run_id,
    normalize_user_id,
    normalize_user_type,
    resolve_column,
    resolve_value,
)
from shuttle_recon.models import UserType

# --- Column resolution ---


def test_resolve_column_ignores_case_and_whitespace():
    row = {" Fecha de Compra ": "2024-01-01", "Usuario": "a@x.com"}
    assert resolve_column(row, "Fecha de compra") == " Fecha de Compra "


def test_resolve_column_falls_back_to_alias():
    row = {"fecha": "2024-01-01", "Usuario": "a@x.com"}
    assert resolve_column(row, "Fecha de compra") == "fecha"
    assert resolve_value(row, "Fecha de compra") == "2024-01-01"


def test_resolve_column_prefers_exact_name_over_alias():
    row = {"email": "alias@x.com", "USUARIO": "primary@x.com"}
    assert resolve_column(row, "Usuario") == "USUARIO"


def test_resolve_column_first_duplicate_wins():
    row = {"Usuario": "first", " usuario": "second"}
    assert resolve_value(row, "Usuario") == "first"


def test_resolve_column_absent_returns_none():
    assert resolve_column({"Otro": 1}, "ID salida") is None
    assert resolve_value({"Otro": 1}, "ID salida") is None
    assert resolve_column({}, "ID salida") is None
    assert resolve_column(None, "ID salida") is None


def test_resolve_column_no_fuzzy_matching():
    # 'Descripcion de ruta' (no accent) is neither the name nor an alias
    assert resolve_column({"Descripcion de ruta": "R1"}, "Descripción de ruta") is None
    assert resolve_column({"descripcion ruta": "R1"}, "Descripción de ruta") == "descripcion ruta"


def test_resolve_column_custom_aliases():
    row = {"correo": "a@x.com"}
    assert resolve_column(row, "Usuario", {"Usuario": ["Correo"]}) == "correo"


# --- Date normalization ---


@pytest.mark.parametrize(
    "value, expected",
    [
        (45292, "2024-01-01"),
        (45292.75, "2024-01-01"),
        ("45292", "2024-01-01"),
        ("31/12/2023", "2023-12-31"),
        ("01/03/2024", "2024-03-01"),
        ("1-3-2024", "2024-03-01"),
        ("2024-03-01", "2024-03-01"),
        ("2024/03/01", "2024-03-01"),
        ("2024-03-01T10:30:00", "2024-03-01"),
        ("01/03/2024 08:15", "2024-03-01"),
        ("1/3/24", "2024-03-01"),
        ("March 5, 2024", "2024-03-05"),
        (datetime(2024, 3, 1, 23, 59), "2024-03-01"),
        (date(2024, 2, 29), "2024-02-29"),
    ],
)
def test_normalize_date(value, expected):
    assert normalize_date(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, "", "   ", "not a date", "31/02/2024", "2023-13-01", True, math.nan, 10**400, INVALID_DATE],
)
def test_normalize_date_invalid(value):
    assert normalize_date(value) == INVALID_DATE


@pytest.mark.parametrize(
    "value",
    [45292, "31/12/2023", "2024-03-01T10:30:00", "1/3/24", "not a date", None, datetime(2024, 3, 1)],
)
def test_normalize_date_is_idempotent(value):
    once = normalize_date(value)
    assert normalize_date(once) == once


# --- User type ---


@pytest.mark.parametrize(
    "label, expected",
    [
        ("alumno", UserType.STUDENT),
        ("  ESTUDIANTE ", UserType.STUDENT),
        ("Student", UserType.STUDENT),
        ("Colaborador", UserType.STAFF),
        ("staff member", UserType.STAFF),
        ("colaborador estudiante", UserType.STUDENT),
        ("Externo", UserType.UNKNOWN),
        ("", UserType.UNKNOWN),
        (None, UserType.UNKNOWN),
    ],
)
def test_normalize_user_type(label, expected):
    assert normalize_user_type(label) is expected


# --- Join keys ---


def test_normalize_user_id():
    assert normalize_user_id("  A@X.com ") == "a@x.com"
    assert normalize_user_id("") is None
    assert normalize_user_id(None) is None


def test_normalize_run_id():
    assert normalize_run_id(" S1 ") == "S1"
    assert normalize_run_id(1024.0) == "1024"
    assert normalize_run_id(math.nan) is None
    assert normalize_run_id("   ") is None
