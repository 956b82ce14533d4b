"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to the `{success: false, message, error?}`
envelope by the exception handlers in main.py.
"""
from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, error: str | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.error = error


class ValidationError(DomainError):
    """Validation error (400)."""
    def __init__(self, message: str = "Missing required parameters", field: str | None = None):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, error=field)


class MintPreparationError(DomainError):
    """Any failure inside the mint pipeline (500), underlying message attached."""
    def __init__(self, error: str | None = None):
        super().__init__(
            "Error preparing NFT mint",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=error,
        )
