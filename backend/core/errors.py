"""Error taxonomy shared by the booking services and the HTTP layer.

Every error carries a stable ``kind`` and the HTTP status it maps to, so
routes never translate messages by hand.
"""


class PSUFlowError(Exception):
    kind = 'error'
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.kind, 'detail': self.message}


class ValidationError(PSUFlowError):
    """Missing or malformed input."""
    kind = 'validation_error'
    status_code = 400


class SlotBlockedError(PSUFlowError):
    kind = 'slot_blocked'
    status_code = 400


class SlotFullError(PSUFlowError):
    kind = 'slot_full'
    status_code = 400


class NotFoundError(PSUFlowError):
    kind = 'not_found'
    status_code = 404


class AuthorizationError(PSUFlowError):
    """The actor does not own the resource."""
    kind = 'forbidden'
    status_code = 403


class ConflictError(PSUFlowError):
    """A status transition guard was violated."""
    kind = 'conflict'
    status_code = 409


class InternalError(PSUFlowError):
    kind = 'internal_error'
    status_code = 500


class DatabaseUnavailableError(InternalError):
    status_code = 503

    def __init__(self, message: str = 'Database unavailable. Verify DATABASE_URL and database credentials.'):
        super().__init__(message)
