"""Domain error taxonomy.

Services raise these; the API layer maps them to HTTP responses in
core/exceptions.py. Infrastructure errors are the only retryable kind.
"""

from dataclasses import dataclass


class FacilitiesError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TenantContextMissing(FacilitiesError):
    """No tenant is available for the calling context."""

    def __init__(self, message: str = "Tenant context required for database operations") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class FieldViolation:
    """A single violated field with a human-readable reason."""

    field: str
    message: str


class ValidationError(FacilitiesError):
    """One or more structural invariants were violated.

    Carries every violation, not just the first one found.
    """

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = list(violations)
        fields = ", ".join(v.field for v in self.violations)
        super().__init__(f"Validation failed for: {fields}")

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class NotFoundError(FacilitiesError):
    """Entity is missing, soft-deleted, or owned by another tenant.

    The message does not say which.
    """

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(FacilitiesError):
    """Duplicate completion or another uniqueness violation."""


class InfrastructureError(FacilitiesError):
    """Storage unavailable, timed out, or a transaction failed. Retryable."""
