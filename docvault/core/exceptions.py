"""Custom exceptions for the DocVault application."""


# -----------------------------------------------------------------------------
# Application Base Error
# -----------------------------------------------------------------------------


class AppError(Exception):
    """Base application error with HTTP semantics.

    All domain exceptions that should map to HTTP responses inherit from this.
    The global error handler in error_handlers.py catches these and returns
    a consistent JSON response.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, detail: str = "An unexpected error occurred", context: dict | None = None):
        self.detail = detail
        self.context = context
        super().__init__(self.detail)


# -----------------------------------------------------------------------------
# Generic CRUD Exceptions
# -----------------------------------------------------------------------------


class EntityNotFound(AppError):
    """Entity not found by primary key (404)."""

    status_code = 404
    error_code = "NOT_FOUND"


class ValidationError(AppError):
    """Malformed input or reference to an entity that does not exist (400)."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class Conflict(AppError):
    """Operation conflicts with current state (409).

    Raised for duplicate names and for deleting folders or departments
    that are still referenced.
    """

    status_code = 409
    error_code = "CONFLICT"


# -----------------------------------------------------------------------------
# Access Control Exceptions
# -----------------------------------------------------------------------------


class AccessDenied(AppError):
    """Entity exists but the caller lacks content access (403)."""

    status_code = 403
    error_code = "ACCESS_DENIED"


class PermissionDenied(AppError):
    """Caller attempted a mutation without ownership or elevated role (403)."""

    status_code = 403
    error_code = "PERMISSION_DENIED"


class IntegrityError(AppError):
    """Stored data violates a structural invariant (500).

    Causes:
        - Cycle in the folder parent chain
        - Parent chain deeper than ``folder_max_depth``
        - Parent reference to a folder that no longer exists
    """

    status_code = 500
    error_code = "INTEGRITY_ERROR"


# -----------------------------------------------------------------------------
# Document Service Exceptions
# -----------------------------------------------------------------------------


class FileTooLargeError(AppError):
    """File exceeds maximum upload size (400)."""

    status_code = 400
    error_code = "FILE_TOO_LARGE"


class FileStorageError(AppError):
    """Failed to write or read a stored file (500)."""

    status_code = 500
    error_code = "STORAGE_FAILED"


# -----------------------------------------------------------------------------
# Chatbot Exceptions
# -----------------------------------------------------------------------------


class ChatbotError(Exception):
    """Base exception for chatbot completion errors.

    Never surfaces to HTTP: the chatbot service catches these and
    falls back to a deterministic answer.
    """

    pass


class LLMConnectionError(ChatbotError):
    """Cannot connect to Ollama.

    Causes:
        - Ollama service unavailable
        - Network connectivity issues
    """

    pass


class LLMTimeoutError(ChatbotError):
    """LLM response timed out."""

    pass

