"""
Domain exceptions raised by the service layer.

Each carries the HTTP status and error code that the exception handlers put
on the wire, so services never import FastAPI.
"""


class AppError(Exception):
    status_code = 500
    code = "server_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(AppError):
    """Missing or malformed input, or a value outside a closed set."""
    status_code = 400
    code = "validation_error"


class AuthenticationFailed(AppError):
    """Missing, invalid or expired credential."""
    status_code = 401
    code = "authentication_error"


class AccessDenied(AppError):
    """Valid credential, insufficient permission."""
    status_code = 403
    code = "access_denied"


class NotFound(AppError):
    status_code = 404
    code = "not_found"


class Conflict(AppError):
    """The record changed between read and conditional write."""
    status_code = 409
    code = "conflict"
