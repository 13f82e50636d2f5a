"""
Exception taxonomy shared by storage, services, pipeline and routes.
"""


class LeadWellError(Exception):
    """Base class for all application errors."""


class ConfigurationError(LeadWellError):
    """Required configuration is missing or invalid."""


class ReasoningError(LeadWellError):
    """The external language-model call failed."""


class MalformedResponseError(ReasoningError):
    """The model answered, but not with JSON matching the expected shape."""


class CircuitOpenError(ReasoningError):
    """Raised when calling through an open circuit breaker."""
    def __init__(self, name, retry_after=None):
        self.name = name
        self.retry_after = retry_after
        super().__init__(f"Circuit breaker '{name}' is OPEN — service unavailable")


class NotFoundError(LeadWellError):
    """A referenced record does not exist."""
    def __init__(self, entity, record_id):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} {record_id} not found")


class ForeignKeyViolation(LeadWellError):
    """A write referenced a parent record that does not exist."""


class ConflictError(LeadWellError):
    """The record's current state does not allow the requested operation."""


class DuplicateError(ConflictError):
    """A write would break a uniqueness rule (username, catalog names)."""


class RequestValidationError(LeadWellError):
    """Request input failed schema validation. Rendered as 400 with field errors."""
    def __init__(self, message, errors=None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)
