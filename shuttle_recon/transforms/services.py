"""Scheduled service runs transformation."""

from .base import BaseTransform
from ..config import SERVICES


class ServicesTransform(BaseTransform):
    category = SERVICES
