"""Keyword maps for standardizing categorical data."""

# Checked in order: the first category with a matching keyword wins
USER_TYPE_KEYWORDS = [
    ("Estudiante", ("alumno", "estudiante", "student")),
    ("Colaborador", ("colaborador", "staff")),
]

# Validation outcome is confirmed only on this exact token (case-insensitive)
AFFIRMATIVE_TOKEN = "sí"

UNKNOWN_ROUTE = "N/A"

# KPI field -> case-insensitive substring looked up in the pass type
PASS_TYPE_KPIS = {
    "pases_semestrales": "semestral",
    "pases_semanales": "semanal",
    "pases_redondos": "redondo",
    "pases_verano": "verano",
    "pases_mensual_colaborador": "mensual colaborador",
    "pases_especiales": "especial",
    "pases_invitado": "invitado",
}

# Filter labels accepted for the user-type filter
USER_TYPE_FILTER_ALL = "Todos"
