"""Custom exception classes for the flashcard backend.

Every error the service reports to a caller derives from FlashcardError and
carries a stable ``category`` plus the HTTP status it maps to.
"""


class FlashcardError(Exception):
    """Base exception for all flashcard backend errors."""

    category = "error"
    status_code = 500

    def __init__(self, message: str):
        """Initialize the exception.

        Args:
            message: Human readable description, safe to return to callers.
        """
        self.message = message
        super().__init__(message)


class ValidationError(FlashcardError):
    """Raised when required input is missing or malformed."""

    category = "validation_error"
    status_code = 400


class UnauthorizedError(FlashcardError):
    """Raised when a request carries no usable credential."""

    category = "unauthorized"
    status_code = 401


class InvalidTokenError(UnauthorizedError):
    """Raised when a token cannot be verified."""

    def __init__(self, message: str = "Invalid authentication credentials"):
        super().__init__(message)


class ForbiddenError(FlashcardError):
    """Raised when the principal's role does not allow the operation."""

    category = "forbidden"
    status_code = 403


class NotFoundError(FlashcardError):
    """Raised when the target of a mutation does not exist."""

    category = "not_found"
    status_code = 404


class CardNotFoundError(NotFoundError):
    """Raised when a requested card cannot be found."""

    def __init__(self, card_id: int):
        """Initialize the exception.

        Args:
            card_id: The ID of the card that was not found.
        """
        self.card_id = card_id
        super().__init__(f"Card '{card_id}' not found")


class ConflictError(FlashcardError):
    """Raised when a unique constraint would be violated."""

    category = "conflict"
    status_code = 409


class StoreError(FlashcardError):
    """Raised when the underlying persistence layer fails.

    The message is deliberately generic; the original exception is chained
    and logged, never returned.
    """

    category = "store_error"
    status_code = 500

    def __init__(self, message: str = "Internal storage error"):
        super().__init__(message)
