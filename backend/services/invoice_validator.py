"""
Invoice Validator Service
Validates and sanitizes invoice input before it reaches the record store
Format checks are a whitelist: anything outside [A-Za-z0-9_-] is rejected
"""

import re
import logging
from typing import Any, List, Mapping, Optional

from api.exceptions import InvalidFormat, MissingParameter, ValidationError
from api.models.invoice_model import FieldError, FieldErrorCode, InvoiceInput

logger = logging.getLogger(__name__)

MAX_FIELD_LENGTH = 255
INVOICE_NUMBER_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,%d}" % MAX_FIELD_LENGTH)
ANGLE_BRACKETS = re.compile(r"[<>]")


def sanitize_input(value: Any) -> str:
    """
    Sanitize a free-text field

    Removes every '<' and '>', trims whitespace and truncates to
    MAX_FIELD_LENGTH characters. Non-string input yields an empty string.
    No HTML entity decoding is attempted. The result never has surrounding
    whitespace, so sanitizing twice changes nothing.
    """
    if not isinstance(value, str):
        return ""

    value = ANGLE_BRACKETS.sub("", value).strip()
    return value[:MAX_FIELD_LENGTH].rstrip()


def is_valid_invoice_number(value: Any) -> bool:
    """Check that value is a 1-255 character token of letters, digits, '-' or '_'"""
    if not value or not isinstance(value, str):
        return False

    return INVOICE_NUMBER_PATTERN.fullmatch(value.strip()) is not None


def _is_blank(value: Any) -> bool:
    # Judged on the stored form, so "<>" counts as blank
    return sanitize_input(value) == ""


class InvoiceValidator:
    """
    Request guard for the lookup and admin write endpoints
    Raises a terminal error instead of returning partial results
    """

    def validate_search(self, invoice_number: Optional[str]) -> str:
        """
        Validate the invoice number of a lookup request

        Format validation runs on the raw value; the sanitized value is
        what the caller gets back.

        Args:
            invoice_number: Raw `invoice` query parameter

        Returns:
            Sanitized invoice number

        Raises:
            MissingParameter: Parameter absent or empty
            InvalidFormat: Parameter contains characters outside the whitelist
        """
        if not invoice_number:
            raise MissingParameter("Invoice number is required")

        if not is_valid_invoice_number(invoice_number):
            logger.warning(f"Rejected invoice number with invalid format: {invoice_number[:100]!r}")
            raise InvalidFormat(
                "Invoice number contains invalid characters. "
                "Only letters, numbers, hyphens, and underscores are allowed."
            )

        return sanitize_input(invoice_number)

    def collect_errors(self, fields: Mapping[str, Any]) -> List[FieldError]:
        """Return every violated rule, in field order"""
        errors: List[FieldError] = []

        if not is_valid_invoice_number(fields.get("invoice_number")):
            errors.append(FieldError(
                field="invoice_number",
                code=FieldErrorCode.INVALID_FORMAT,
                message="Invalid invoice number format"
            ))

        if _is_blank(fields.get("bank_name")):
            errors.append(FieldError(
                field="bank_name",
                code=FieldErrorCode.REQUIRED,
                message="Bank name is required"
            ))

        if _is_blank(fields.get("bank_account_number")):
            errors.append(FieldError(
                field="bank_account_number",
                code=FieldErrorCode.REQUIRED,
                message="Bank account number is required"
            ))

        return errors

    def validate_creation(self, fields: Mapping[str, Any]) -> InvoiceInput:
        """
        Validate and sanitize an invoice create/update payload

        Args:
            fields: Raw body fields (JSON object or form data)

        Returns:
            InvoiceInput with every field sanitized

        Raises:
            ValidationError: One or more fields are invalid
        """
        errors = self.collect_errors(fields)
        if errors:
            raise ValidationError(errors)

        beneficiary = sanitize_input(fields.get("beneficiary_name"))

        return InvoiceInput(
            invoice_number=sanitize_input(fields["invoice_number"]),
            bank_name=sanitize_input(fields["bank_name"]),
            bank_account_number=sanitize_input(fields["bank_account_number"]),
            beneficiary_name=beneficiary or None
        )


# Singleton instance
_validator = None

def get_invoice_validator() -> InvoiceValidator:
    """Get or create invoice validator instance"""
    global _validator
    if _validator is None:
        _validator = InvoiceValidator()
    return _validator
