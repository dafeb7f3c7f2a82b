"""Aggregate model imports for Alembic auto-detection."""

from drayboard.models.container import Container  # noqa: F401
from drayboard.models.yard import Yard  # noqa: F401
