"""
Admin routes - invoice management and verification audit log
Every endpoint requires the shared admin key (`key` in query or body)
"""

from fastapi import APIRouter, Depends, Query
from typing import Any, Dict
import logging

from api.dependencies import get_app_config, get_store, get_validator, read_body_fields, require_admin
from api.exceptions import ConstraintViolation, NotFound
from api.models.invoice_model import AdminDashboard
from api.models.response_model import ErrorResponse
from api.response_formatter import ResponseFormatter
from api.storage import InvoiceStore
from config import AppConfig
from services.invoice_validator import InvoiceValidator

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    responses={403: {"model": ErrorResponse}, 503: {"model": ErrorResponse}}
)

MAX_LOG_LIMIT = 500


@router.get("")
def admin_dashboard(
    key_source: str = Depends(require_admin),
    store: InvoiceStore = Depends(get_store),
    config: AppConfig = Depends(get_app_config)
):
    """All invoices plus the most recent verification requests"""
    invoices = store.list_all()
    logs = store.list_logs(config.admin_log_limit)

    dashboard = AdminDashboard(invoices=invoices, logs=logs, invoice_count=len(invoices))
    return ResponseFormatter.success_response(data=dashboard.model_dump(mode="json"))


@router.get("/logs")
def list_verification_logs(
    limit: int = Query(100, description="Maximum entries to return"),
    key_source: str = Depends(require_admin),
    store: InvoiceStore = Depends(get_store)
):
    """Verification log, newest first"""
    limit = max(1, min(limit, MAX_LOG_LIMIT))
    logs = store.list_logs(limit)

    return ResponseFormatter.success_response(
        data=[entry.model_dump(mode="json") for entry in logs],
        metadata={"limit": limit, "count": len(logs)}
    )


@router.get("/invoices/{invoice_id}", responses={404: {"model": ErrorResponse}})
def get_invoice(
    invoice_id: int,
    key_source: str = Depends(require_admin),
    store: InvoiceStore = Depends(get_store)
):
    """Load one invoice for editing"""
    invoice = store.get_by_id(invoice_id)
    if invoice is None:
        raise NotFound("Invoice not found")

    return ResponseFormatter.success_response(data=invoice.model_dump(mode="json"))


@router.post("/create", status_code=201, responses={400: {"model": ErrorResponse}})
def create_invoice(
    key_source: str = Depends(require_admin),
    fields: Dict[str, Any] = Depends(read_body_fields),
    store: InvoiceStore = Depends(get_store),
    validator: InvoiceValidator = Depends(get_validator)
):
    """
    Register a new invoice

    The exists() pre-check only gives a friendlier error; a concurrent
    duplicate is still rejected by the unique constraint.
    """
    data = validator.validate_creation(fields)

    if store.exists(data.invoice_number):
        raise ConstraintViolation(f"Invoice number {data.invoice_number} already exists in the system")

    invoice = store.create(
        data.invoice_number,
        data.bank_name,
        data.bank_account_number,
        data.beneficiary_name
    )

    return ResponseFormatter.success_response(
        data=invoice.model_dump(mode="json"),
        message=f"Invoice {invoice.invoice_number} registered"
    )


@router.post("/update/{invoice_id}", responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}})
def update_invoice(
    invoice_id: int,
    key_source: str = Depends(require_admin),
    fields: Dict[str, Any] = Depends(read_body_fields),
    store: InvoiceStore = Depends(get_store),
    validator: InvoiceValidator = Depends(get_validator)
):
    """Replace the details of an existing invoice"""
    data = validator.validate_creation(fields)

    invoice = store.update(
        invoice_id,
        data.invoice_number,
        data.bank_name,
        data.bank_account_number,
        data.beneficiary_name
    )

    if invoice is None:
        raise NotFound("Invoice not found")

    return ResponseFormatter.success_response(
        data=invoice.model_dump(mode="json"),
        message=f"Invoice {invoice.invoice_number} updated"
    )


@router.post("/delete/{invoice_id}")
def delete_invoice(
    invoice_id: int,
    key_source: str = Depends(require_admin),
    store: InvoiceStore = Depends(get_store)
):
    """Delete an invoice; deleting an unknown id is not an error"""
    removed = store.delete(invoice_id)

    if removed is None:
        return ResponseFormatter.success_response(
            data={"deleted": False, "id": invoice_id},
            message="Invoice not found; nothing was deleted"
        )

    return ResponseFormatter.success_response(
        data={"deleted": True, "invoice": removed.model_dump(mode="json")},
        message=f"Invoice {removed.invoice_number} deleted"
    )
