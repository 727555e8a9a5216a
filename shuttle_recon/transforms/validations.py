"""Ride validations transformation."""

from .base import BaseTransform
from ..config import VALIDATIONS


class ValidationsTransform(BaseTransform):
    category = VALIDATIONS
