"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Every error a command can report derives from ApplicationError and is
converted to a single stderr line plus exit code 1 at the command boundary.
"""

LOGIN_HINT = "Please run: sprout-track auth login"


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when user input fails local validation."""

    def __init__(self, message: str = "Validation failed") -> None:
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ConfigurationError(ApplicationError):
    """Raised when the CLI is not configured or its settings file is unreadable."""

    def __init__(
        self,
        message: str = "Server not configured. Please run: sprout-track config set-server <url>",
    ) -> None:
        super().__init__(message, code="CFG_NOT_CONFIGURED")


class AuthenticationError(ApplicationError):
    """Raised when the credential is missing, expired, or rejected."""

    def __init__(self, message: str = f"Authentication required. {LOGIN_HINT}") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class ExternalServiceError(ApplicationError):
    """Raised when the remote service rejects a request or cannot be reached."""

    def __init__(self, message: str = "External service error", status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, code="SYS_EXTERNAL_SERVICE_ERROR")


class SessionConflictError(ConflictError):
    """Raised when a session is started while another one is still open."""

    def __init__(self, kind: str, record_id: str | None) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(
            f"There is already an ongoing {kind} session. "
            f"End the existing session first (ID: {record_id})"
        )


class NoOpenSessionError(NotFoundError):
    """Raised when a session is ended but none is open."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"No ongoing {kind} session found")
