"""Application error taxonomy.

Services raise these; ``src.main`` renders them as JSON responses with the
matching HTTP status code.
"""


class AppError(Exception):
    """Base class for errors that map to a client-facing HTTP response.

    Attributes:
        status_code: HTTP status code to respond with
        message: Human-readable message returned to the client
    """

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationFailed(AppError):
    """Input is malformed or missing required data."""

    status_code = 400


class DomainError(AppError):
    """Input is well-formed but a business rule refuses it."""

    status_code = 400


class Unauthorized(AppError):
    """Missing, invalid or expired credentials."""

    status_code = 401


class TokenExpiredError(Unauthorized):
    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class TokenInvalidError(Unauthorized):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class Forbidden(AppError):
    """Authenticated, but the role is not allowed to perform the action."""

    status_code = 403


class NotFound(AppError):
    status_code = 404


class Conflict(AppError):
    """A uniqueness rule would be violated."""

    status_code = 409
