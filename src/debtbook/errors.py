"""Domain error taxonomy.

Learn: Services raise these, never HTTPException. The API layer is the
only place that knows about status codes — it catches domain errors
and translates them into HTTP responses.
"""


class LedgerError(Exception):
    """Base class for all domain errors."""


class Unauthorized(LedgerError):
    """No verified identity: missing/invalid/expired token or unknown user."""


class InvalidToken(LedgerError):
    """Token signature, structure, or validity window check failed."""


class ValidationError(LedgerError):
    """Input shape or balance invariant violated. Nothing was written."""


class NotFound(LedgerError):
    """Owner-scoped lookup missed.

    Raised both when the record does not exist and when it belongs to
    somebody else. Callers must not be able to tell the two apart.
    """


class InternalError(LedgerError):
    """Unexpected persistence or runtime failure."""
