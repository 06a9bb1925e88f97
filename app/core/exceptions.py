"""Domain errors raised by the service layer.

Endpoints let these propagate; ``app.main`` maps each class to an HTTP status
and the standard ``ErrorResponse`` envelope.
"""


class AppError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed input rejected before any state is touched."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFoundError(AppError):
    """Referenced record does not exist or belongs to another owner."""

    status_code = 404
    code = "RESOURCE_NOT_FOUND"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class EmailDeliveryError(AppError):
    """Outbound email transport failed."""

    status_code = 502
    code = "EMAIL_DELIVERY_FAILED"
