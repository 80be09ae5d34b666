"""
Centralized Error Code Definitions
Provides consistent error handling across the Invoice Bank Verification API
"""

from enum import Enum
from typing import Dict, Optional, Tuple


class ErrorCode(str, Enum):
    """Standardized error codes for API responses"""

    # Request Validation Errors (1000-1099)
    MISSING_PARAMETER = "REQUEST_1000"
    INVALID_FORMAT = "REQUEST_1001"
    VALIDATION_FAILED = "REQUEST_1002"
    METHOD_NOT_ALLOWED = "REQUEST_1003"
    RATE_LIMITED = "REQUEST_1004"
    REQUEST_REJECTED = "REQUEST_1099"

    # Data Errors (2000-2099)
    INVOICE_NOT_FOUND = "DATA_2000"
    DUPLICATE_INVOICE = "DATA_2001"

    # Service Errors (3000-3099)
    DATABASE_CONNECTION_FAILED = "SERVICE_3001"

    # Authentication/Authorization Errors (4000-4099)
    FORBIDDEN = "AUTH_4001"

    # Internal Errors (5000-5099)
    INTERNAL_SERVER_ERROR = "INTERNAL_5000"
    CONFIGURATION_ERROR = "INTERNAL_5001"
    PAGE_NOT_FOUND = "INTERNAL_5004"


class ErrorMessage:
    """User-friendly error messages and suggested actions"""

    MESSAGES: Dict[ErrorCode, Dict[str, str]] = {
        # Request Validation Errors
        ErrorCode.MISSING_PARAMETER: {
            "message": "Invoice number is required",
            "suggestion": "Enter the invoice number printed on your invoice",
            "status_code": 400
        },
        ErrorCode.INVALID_FORMAT: {
            "message": "Invoice number contains invalid characters",
            "suggestion": "Only letters, numbers, hyphens, and underscores are allowed",
            "status_code": 400
        },
        ErrorCode.VALIDATION_FAILED: {
            "message": "Validation error",
            "suggestion": "Correct the highlighted fields and submit again",
            "status_code": 400
        },
        ErrorCode.METHOD_NOT_ALLOWED: {
            "message": "Method not allowed",
            "suggestion": "Check the API documentation at /docs for the supported methods",
            "status_code": 405
        },
        ErrorCode.RATE_LIMITED: {
            "message": "Too many requests from this IP, please try again later",
            "suggestion": "Wait before sending more requests",
            "status_code": 429
        },
        ErrorCode.REQUEST_REJECTED: {
            "message": "Request could not be processed",
            "suggestion": "Check the request and try again",
            "status_code": 400
        },

        # Data Errors
        ErrorCode.INVOICE_NOT_FOUND: {
            "message": "Invoice not found",
            "suggestion": "Check the invoice ID and try again",
            "status_code": 404
        },
        ErrorCode.DUPLICATE_INVOICE: {
            "message": "Duplicate invoice",
            "suggestion": "Use a different invoice number or edit the existing record",
            "status_code": 400
        },

        # Service Errors
        ErrorCode.DATABASE_CONNECTION_FAILED: {
            "message": "Service temporarily unavailable",
            "suggestion": "Please try again later. Contact support if issue persists",
            "status_code": 503
        },

        # Authentication/Authorization Errors
        ErrorCode.FORBIDDEN: {
            "message": "Access denied",
            "suggestion": "Invalid or missing admin key",
            "status_code": 403
        },

        # Internal Errors
        ErrorCode.INTERNAL_SERVER_ERROR: {
            "message": "An unexpected error occurred",
            "suggestion": "Please try again. Contact support if issue persists",
            "status_code": 500
        },
        ErrorCode.CONFIGURATION_ERROR: {
            "message": "System configuration error",
            "suggestion": "Please contact support",
            "status_code": 500
        },
        ErrorCode.PAGE_NOT_FOUND: {
            "message": "Page not found",
            "suggestion": "The page you are looking for does not exist",
            "status_code": 404
        }
    }

    @classmethod
    def get_error_response(cls, error_code: ErrorCode, details: Optional[str] = None) -> Tuple[Dict, int]:
        """
        Get standardized error response

        Args:
            error_code: Error code from ErrorCode enum
            details: Optional additional details

        Returns:
            Tuple of (error response dictionary, HTTP status code)
        """
        error_info = cls.MESSAGES.get(error_code, {
            "message": "An error occurred",
            "suggestion": "Please try again",
            "status_code": 500
        })

        response = {
            "success": False,
            "error": {
                "code": error_code.value,
                "message": error_info["message"],
                "suggestion": error_info["suggestion"]
            }
        }

        if details:
            response["error"]["details"] = details

        return response, error_info["status_code"]

    @classmethod
    def get_status_code(cls, error_code: ErrorCode) -> int:
        """Get HTTP status code for error"""
        return cls.MESSAGES.get(error_code, {}).get("status_code", 500)
