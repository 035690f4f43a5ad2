"""
Typed service errors.

Services raise these; core.exception_handlers maps them to HTTP responses
using the standard error envelope.
"""


class AppError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "An internal error occurred"):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"


class InvalidArgumentError(AppError):
    status_code = 400
    code = "invalid_argument"


class ConflictError(AppError):
    status_code = 409
    code = "conflict"


class InternalError(AppError):
    """Unhandled state or a store failure hidden from the caller."""
