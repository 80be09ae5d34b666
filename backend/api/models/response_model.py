"""Response models for API endpoints"""

from pydantic import BaseModel
from typing import Optional, List
from .invoice_model import FieldError


class ErrorDetail(BaseModel):
    """Error details"""
    code: str
    message: str
    suggestion: Optional[str] = None
    details: Optional[str] = None
    fields: Optional[List[FieldError]] = None


class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    timestamp: str
    error: ErrorDetail
