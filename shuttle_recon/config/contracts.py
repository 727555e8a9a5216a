"""Logical schema contract for the three input categories.

Keys are the logical column names the pipeline reads. Physical headers are
matched case- and whitespace-insensitively; aliases are exact alternates
after the same normalization (no fuzzy matching).
"""

TICKETS = "tickets"
SERVICES = "services"
VALIDATIONS = "validations"

CATEGORIES = (TICKETS, SERVICES, VALIDATIONS)

# Names shown to operators in error messages
CATEGORY_LABELS = {
    TICKETS: "tickets",
    SERVICES: "servicios",
    VALIDATIONS: "validaciones",
}

# Spanish names used by the exports and the operators
CATEGORY_ALIASES = {
    "tickets": TICKETS,
    "ticket": TICKETS,
    "services": SERVICES,
    "servicios": SERVICES,
    "validations": VALIDATIONS,
    "validaciones": VALIDATIONS,
}

# A file is only accepted for a category when its name starts with one of these
CATEGORY_FILE_PREFIXES = {
    TICKETS: ("ticket",),
    SERVICES: ("servicio", "service"),
    VALIDATIONS: ("validacion", "validation"),
}

# Tickets are transformed before validation, so 'Tipo de pase' is required
# even though the raw exports carry it under a placeholder header.
VALIDATION_CONTRACT = {
    TICKETS: ["Fecha de compra", "Usuario", "Tickets", "Tipo de pase"],
    SERVICES: ["ID salida", "Fecha", "Descripción de ruta", "Tickets utilizados", "% Ocupación"],
    VALIDATIONS: ["ID salida", "Fecha", "Usuario", "Tipo_usuario", "Validado"],
}

ALIASES = {
    "Fecha de compra": ["fecha de operacion", "fecha"],
    "Usuario": ["email", "email de usuario"],
    "ID salida": ["id de salida", "id servicio"],
    "Descripción de ruta": ["descripcion ruta"],
    "% Ocupación": ["ocupacion"],
}

# Legacy headers produced by the ticket export (pandas-style unnamed columns)
TICKETS_RENAME_MAP = {
    "unnamed: 11": "Tipo de pase",
}
TICKETS_DROP_COLUMNS = ["unnamed: 6"]
