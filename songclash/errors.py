"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    code = "internal"

    def __init__(self, message, status_code=500):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def to_dict(self):
        """Serialize the error for a JSON response."""
        return {"code": self.code, "message": self.message}


class ValidationError(AppError):
    """Raised when user input fails validation."""

    code = "invalid-argument"

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    code = "already-exists"

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    code = "not-found"

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class PermissionDeniedError(AppError):
    """Raised when the caller does not hold the role an action requires."""

    code = "permission-denied"

    def __init__(self, message="Permission denied."):
        """Initialize the error."""
        super().__init__(message, 403)


class FailedPreconditionError(AppError):
    """Raised when the game or round is not in a state that allows the action."""

    code = "failed-precondition"

    def __init__(self, message="The game is not in the required state."):
        """Initialize the error."""
        super().__init__(message, 400)


class ResourceExhaustedError(AppError):
    """Raised when a capacity limit has been reached."""

    code = "resource-exhausted"

    def __init__(self, message="Capacity exhausted."):
        """Initialize the error."""
        super().__init__(message, 429)


class InternalError(AppError):
    """Raised when stored data violates an invariant."""

    code = "internal"

    def __init__(self, message="An unexpected server error occurred."):
        """Initialize the error."""
        super().__init__(message, 500)
