"""repodesk exception classes."""


class RepoDeskError(Exception):
    """Base exception for all repodesk errors."""

    status: int = 500

    def __init__(
        self, code: str, message: str, request_id: str | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(f"[{code}] {message}")


class ConfigurationError(RepoDeskError):
    """Raised when settings are invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class ValidationError(RepoDeskError):
    """Raised on invalid input, locally or as reported by the store."""

    status = 400


class InvalidRepoFormatError(ValidationError):
    """Raised when a repository identifier is not of the form 'owner/name'."""

    def __init__(self, value: str) -> None:
        super().__init__(
            "INVALID_REPO_FORMAT",
            f"Invalid repo format {value!r}. Use 'owner/repo'",
        )
        self.value = value


class UndecodableError(RepoDeskError):
    """Raised when file content uses an encoding we cannot decode."""

    status = 400


class NotAFileError(RepoDeskError):
    """Raised when a path expected to be a file resolves to a directory."""

    status = 400


class AuthenticationError(RepoDeskError):
    """Raised when the token is missing, expired or invalid."""

    status = 401


class AuthorizationError(RepoDeskError):
    """Raised when the token lacks permission for the operation."""

    status = 403


class NotFoundError(RepoDeskError):
    """Raised when a repository, ref or path does not exist."""

    status = 404


class ConflictError(RepoDeskError):
    """Raised when a write is based on a stale revision."""

    status = 409


class RateLimitedError(RepoDeskError):
    """Raised when rate limited."""

    status = 429

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, request_id)
        self.retry_after = retry_after


class ServerError(RepoDeskError):
    """Raised on server errors (5xx) and connection failures."""

    pass
