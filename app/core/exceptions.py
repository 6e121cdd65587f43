"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        errors: list[str] | None = None,
    ):
        """Initialize exception with message, status code and optional field errors."""
        self.message = message
        self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)


class InvalidIdException(AppException):
    """Identifier is not syntactically valid for the store."""

    def __init__(self, resource: str):
        """Initialize with 400 status code."""
        super().__init__(f"Invalid {resource} Id", status_code=400)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class MissingFieldsException(AppException):
    """Required fields missing from a create request."""

    def __init__(self, fields: list[str]):
        """Initialize with 400 status code and the full list of missing names."""
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}", status_code=400)


class ValidationException(AppException):
    """Field format validation failed."""

    def __init__(self, errors: list[str], message: str = "Validation error"):
        """Initialize with 400 status code and per-field messages."""
        super().__init__(message, status_code=400, errors=errors)


class DuplicateKeyException(AppException):
    """Unique constraint violated in the record store."""

    def __init__(self, message: str = "Duplicate key"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class DatabaseException(AppException):
    """Unexpected record store failure."""

    def __init__(self, cause: str):
        """Initialize with 500 status code, keeping the cause for diagnostics."""
        self.cause = cause
        super().__init__(f"Server error: {cause}", status_code=500)


class DatabaseConnectionException(DatabaseException):
    """Record store could not be reached."""
