"""
Domain exceptions for the Invoice Bank Verification API
Each exception is bound to an ErrorCode so the route layer can render it
"""

from typing import List, Optional

from api.error_codes import ErrorCode
from api.models.invoice_model import FieldError


class InvoiceServiceError(Exception):
    """Base class for errors that terminate a request with a structured payload"""

    error_code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(f"[{self.error_code.value}] {message}")


class MissingParameter(InvoiceServiceError):
    """A required request parameter was absent"""
    error_code = ErrorCode.MISSING_PARAMETER


class InvalidFormat(InvoiceServiceError):
    """Invoice number failed the whitelist check"""
    error_code = ErrorCode.INVALID_FORMAT


class ValidationError(InvoiceServiceError):
    """
    Aggregate of field-level validation failures

    The errors stay structured; they are joined into one string only
    when rendered for display.
    """

    error_code = ErrorCode.VALIDATION_FAILED

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__("Validation error", details=self.display_message)

    @property
    def display_message(self) -> str:
        return ", ".join(error.message for error in self.errors)


class AccessDenied(InvoiceServiceError):
    """Admin key absent or wrong"""
    error_code = ErrorCode.FORBIDDEN


class NotFound(InvoiceServiceError):
    """Referenced invoice id does not exist"""
    error_code = ErrorCode.INVOICE_NOT_FOUND


class ConstraintViolation(InvoiceServiceError):
    """Invoice number already exists at the storage layer"""
    error_code = ErrorCode.DUPLICATE_INVOICE


class StorageUnavailable(InvoiceServiceError):
    """Connection or query failure in the record store"""
    error_code = ErrorCode.DATABASE_CONNECTION_FAILED


class ConfigurationError(InvoiceServiceError):
    """Required configuration is missing or invalid"""
    error_code = ErrorCode.CONFIGURATION_ERROR

