"""Engine error taxonomy.

Detection functions never raise; everything that touches stored state raises
one of these.
"""

import re
from typing import Any, Optional

_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.:\-]{1,64}$")


class CompanionBondsError(Exception):
    """Base class for engine errors."""


class NotFoundError(CompanionBondsError):
    """Attitude record, person or interaction is absent."""


class ConflictError(CompanionBondsError):
    """Interaction is already completed.

    Carries the stored record so callers can treat a retry as a no-op.
    """

    def __init__(self, message: str, existing: Optional[Any] = None) -> None:
        super().__init__(message)
        self.existing = existing


class InvalidDimensionError(CompanionBondsError, ValueError):
    """Dimension name is not one of the 20 attitude dimensions."""

    def __init__(self, dimension: str) -> None:
        super().__init__(f"Unknown attitude dimension: {dimension!r}")
        self.dimension = dimension


class ValidationError(CompanionBondsError, ValueError):
    """Malformed identifier or out-of-domain target type."""


class PersistenceError(CompanionBondsError):
    """Storage kept failing after bounded retries."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


def validate_id(value: Any, field_name: str = "id") -> str:
    """Identifiers are short strings of [A-Za-z0-9_.:-]."""
    if not isinstance(value, str) or not _ID_PATTERN.match(value):
        raise ValidationError(f"Malformed {field_name}: {value!r}")
    return value
