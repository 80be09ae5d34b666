"""
Response Formatter Service
Standardizes API response format across all endpoints
"""

from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime, timezone
import logging

from api.error_codes import ErrorCode, ErrorMessage
from api.exceptions import InvoiceServiceError, ValidationError

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ResponseFormatter:
    """
    Formats API responses with consistent structure
    """

    @staticmethod
    def success_response(
        data: Any = None,
        message: Optional[str] = None,
        metadata: Optional[Dict] = None
    ) -> Dict:
        """
        Format successful API response

        Args:
            data: Response data
            message: Optional success message
            metadata: Optional metadata

        Returns:
            Standardized success response
        """
        response = {
            "success": True,
            "timestamp": _timestamp()
        }

        if message:
            response["message"] = message

        if data is not None:
            response["data"] = data

        if metadata:
            response["metadata"] = metadata

        return response

    @staticmethod
    def error_response(
        error_code: ErrorCode,
        details: Optional[str] = None,
        fields: Optional[List[Dict]] = None
    ) -> Tuple[Dict, int]:
        """
        Format error API response

        Args:
            error_code: Error code from ErrorCode enum
            details: Optional additional details
            fields: Optional field-level validation errors

        Returns:
            Tuple of (error response dict, status code)
        """
        response, status_code = ErrorMessage.get_error_response(error_code, details)
        response["timestamp"] = _timestamp()

        if fields:
            response["error"]["fields"] = fields

        return response, status_code

    @classmethod
    def exception_response(cls, exc: InvoiceServiceError) -> Tuple[Dict, int]:
        """
        Format a domain exception

        Storage and configuration failures never expose their details.
        """
        if isinstance(exc, ValidationError):
            return cls.error_response(
                exc.error_code,
                details=exc.display_message,
                fields=[error.model_dump(mode="json") for error in exc.errors]
            )

        if ErrorMessage.get_status_code(exc.error_code) >= 500:
            return cls.error_response(exc.error_code)

        return cls.error_response(exc.error_code, details=exc.message)

