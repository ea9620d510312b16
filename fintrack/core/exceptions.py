"""Domain errors raised by services and translated at the request boundary."""


class FinanceTrackerError(Exception):
    """Base exception for backend errors."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FinanceTrackerError):
    status_code = 400
    default_message = "Invalid input"


class InvalidCredentials(FinanceTrackerError):
    status_code = 401
    default_message = "Invalid credentials"


class Unauthenticated(FinanceTrackerError):
    status_code = 401
    default_message = "Not authorized to access this route"


class Forbidden(FinanceTrackerError):
    status_code = 403
    default_message = "Not authorized to perform this action"


class NotFound(FinanceTrackerError):
    status_code = 404
    default_message = "Resource not found"


class DuplicateEmail(FinanceTrackerError):
    status_code = 400
    default_message = "Email already in use"


class DuplicateCategory(FinanceTrackerError):
    status_code = 400
    default_message = "A budget for this category already exists"


class InvalidResetToken(FinanceTrackerError):
    status_code = 400
    default_message = "Reset token is invalid or has expired"


class UnsupportedMediaType(FinanceTrackerError):
    status_code = 400
    default_message = "Please upload an image file"


class PayloadTooLarge(FinanceTrackerError):
    status_code = 413
    default_message = "File is too large"
