"""Invoice verification routes - public bank-account lookup"""

from fastapi import APIRouter, Depends, Query, Request
from typing import Optional
import logging

from api.dependencies import get_client_ip, get_store, get_validator
from api.models.invoice_model import VerificationResult
from api.models.response_model import ErrorResponse
from api.response_formatter import ResponseFormatter
from api.storage import InvoiceStore
from services.invoice_validator import InvoiceValidator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.get(
    "/verify",
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}}
)
def verify_invoice(
    request: Request,
    invoice: Optional[str] = Query(None, description="Invoice number to verify"),
    store: InvoiceStore = Depends(get_store),
    validator: InvoiceValidator = Depends(get_validator)
):
    """
    Look up the bank account registered for an invoice number

    Every lookup is written to the verification log, whether or not the
    invoice exists.
    """
    invoice_number = validator.validate_search(invoice)
    client_ip = get_client_ip(request)

    store.append_log(invoice_number, client_ip)

    record = store.get_by_number(invoice_number)

    if record is None:
        logger.info(f"Verification miss: {invoice_number} from {client_ip}")
        return ResponseFormatter.success_response(
            data={"found": False, "invoice_number": invoice_number},
            message="No bank details are registered for this invoice number"
        )

    logger.info(f"Verification hit: {invoice_number} from {client_ip}")
    return ResponseFormatter.success_response(
        data={
            "found": True,
            "invoice": VerificationResult.from_invoice(record).model_dump(mode="json")
        }
    )
