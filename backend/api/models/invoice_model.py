"""
Pydantic models for invoice records and verification logs
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum


class Invoice(BaseModel):
    """Invoice record mapping an invoice number to bank-account details"""
    id: int
    invoice_number: str
    bank_name: str
    bank_account_number: str
    beneficiary_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class VerificationLogEntry(BaseModel):
    """Audit record of one lookup attempt"""
    id: int
    invoice_number: str
    ip_address: str
    verified_at: datetime


class InvoiceInput(BaseModel):
    """Sanitized payload for creating or updating an invoice"""
    invoice_number: str
    bank_name: str
    bank_account_number: str
    beneficiary_name: Optional[str] = None


class FieldErrorCode(str, Enum):
    """Types of field validation errors"""
    REQUIRED = "required"
    INVALID_FORMAT = "invalid_format"


class FieldError(BaseModel):
    """Individual field validation error"""
    field: str
    code: FieldErrorCode
    message: str

    class Config:
        use_enum_values = True


class VerificationResult(BaseModel):
    """Public view of an invoice returned by the lookup endpoint"""
    number: str
    bank_name: str
    account_number: str
    beneficiary: Optional[str] = None

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "VerificationResult":
        return cls(
            number=invoice.invoice_number,
            bank_name=invoice.bank_name,
            account_number=invoice.bank_account_number,
            beneficiary=invoice.beneficiary_name
        )


class AdminDashboard(BaseModel):
    """Invoices and recent lookups shown on the admin dashboard"""
    invoices: List[Invoice] = Field(default_factory=list)
    logs: List[VerificationLogEntry] = Field(default_factory=list)
    invoice_count: int = 0
