# shared/exceptions.py
"""
Domain exceptions with stable, machine-readable codes.

Every error the reporting engine or the ledger write path raises on purpose
derives from LedgerAppError. The API layer turns them into
``{'status': 'error', 'message': ..., 'code': ...}`` responses using
``status_code``; anything else is an unexpected failure and is left to
Django's default handling.
"""


class LedgerAppError(Exception):
    """Base exception for expected (operational) errors."""
    status_code = 400
    default_code = 'BAD_REQUEST'

    def __init__(self, message, code=None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)

    def with_prefix(self, prefix):
        """Return a copy of this error whose message starts with ``prefix``."""
        return type(self)(f"{prefix}{self.message}", code=self.code)

    def as_dict(self):
        return {'status': 'error', 'message': self.message, 'code': self.code}


class MalformedQuery(LedgerAppError):
    """Bad or missing report duration inputs."""
    default_code = 'INVALID_DURATION'


class EntityNotFound(LedgerAppError):
    """A referenced farm, flock, shed, buyer or ledger does not exist."""
    status_code = 404
    default_code = 'NOT_FOUND'


class RelationshipMismatch(LedgerAppError):
    """The farm -> flock -> shed chain of a ledger entry is inconsistent."""
    default_code = 'INVALID_RELATIONSHIP'


class NumericInconsistency(LedgerAppError):
    """Weights and amounts of a ledger entry do not add up."""
    default_code = 'INVALID_NUMERIC_VALUES'


class InvalidRequest(LedgerAppError):
    """Structurally unusable request payload (empty bulk list, no valid ids)."""
    default_code = 'INVALID_REQUEST'
