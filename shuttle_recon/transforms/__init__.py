"""Per-category row transforms that enforce the data contract."""

from .base import BaseTransform, validate_row
from .tickets import TicketsTransform
from .services import ServicesTransform
from .validations import ValidationsTransform
from ..config import SERVICES, TICKETS, VALIDATIONS

TRANSFORM_MAP = {
    TICKETS: TicketsTransform,
    SERVICES: ServicesTransform,
    VALIDATIONS: ValidationsTransform,
}

__all__ = [
    "BaseTransform",
    "validate_row",
    "TicketsTransform",
    "ServicesTransform",
    "ValidationsTransform",
    "TRANSFORM_MAP",
]
