"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when a caller breaks the input contract (e.g. passes None for a collection)."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")
