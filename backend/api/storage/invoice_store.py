"""In-memory invoice storage (for development/testing)"""

from typing import Dict, List, Optional, Protocol
from datetime import datetime, timezone
import itertools
import logging
import threading

from api.exceptions import ConstraintViolation
from api.models.invoice_model import Invoice, VerificationLogEntry

logger = logging.getLogger(__name__)

DEFAULT_LOG_LIMIT = 100


class InvoiceStore(Protocol):
    """Data-access contract shared by every record store backend"""

    def get_by_number(self, invoice_number: str) -> Optional[Invoice]: ...

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]: ...

    def exists(self, invoice_number: str) -> bool: ...

    def create(
        self,
        invoice_number: str,
        bank_name: str,
        bank_account_number: str,
        beneficiary_name: Optional[str] = None
    ) -> Invoice: ...

    def update(
        self,
        invoice_id: int,
        invoice_number: str,
        bank_name: str,
        bank_account_number: str,
        beneficiary_name: Optional[str] = None
    ) -> Optional[Invoice]: ...

    def delete(self, invoice_id: int) -> Optional[Invoice]: ...

    def list_all(self) -> List[Invoice]: ...

    def append_log(self, invoice_number: str, ip_address: str) -> VerificationLogEntry: ...

    def list_logs(self, limit: int = DEFAULT_LOG_LIMIT) -> List[VerificationLogEntry]: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryInvoiceStore:
    """
    Process-local invoice storage

    Mirrors the database contract: invoice_number is unique at insert and
    update time, updated_at is refreshed on every mutation, and listings
    are most-recent-first. Data is lost on restart.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._invoices: Dict[int, Invoice] = {}
        self._logs: List[VerificationLogEntry] = []
        self._invoice_ids = itertools.count(1)
        self._log_ids = itertools.count(1)
        logger.info("In-memory invoice store initialized")

    def _find_by_number(self, invoice_number: str) -> Optional[Invoice]:
        for invoice in self._invoices.values():
            if invoice.invoice_number == invoice_number:
                return invoice
        return None

    def get_by_number(self, invoice_number: str) -> Optional[Invoice]:
        with self._lock:
            return self._find_by_number(invoice_number)

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        with self._lock:
            return self._invoices.get(invoice_id)

    def exists(self, invoice_number: str) -> bool:
        return self.get_by_number(invoice_number) is not None

    def create(
        self,
        invoice_number: str,
        bank_name: str,
        bank_account_number: str,
        beneficiary_name: Optional[str] = None
    ) -> Invoice:
        """
        Insert a new invoice

        Raises:
            ConstraintViolation: invoice_number already stored
        """
        with self._lock:
            if self._find_by_number(invoice_number) is not None:
                raise ConstraintViolation(f"Invoice number {invoice_number} already exists in the system")

            now = _now()
            invoice = Invoice(
                id=next(self._invoice_ids),
                invoice_number=invoice_number,
                bank_name=bank_name,
                bank_account_number=bank_account_number,
                beneficiary_name=beneficiary_name,
                created_at=now,
                updated_at=now
            )
            self._invoices[invoice.id] = invoice

        logger.info(f"Created invoice: {invoice.id} ({invoice_number})")
        return invoice

    def update(
        self,
        invoice_id: int,
        invoice_number: str,
        bank_name: str,
        bank_account_number: str,
        beneficiary_name: Optional[str] = None
    ) -> Optional[Invoice]:
        """
        Replace the fields of an existing invoice

        Returns:
            Updated invoice, or None if invoice_id is unknown

        Raises:
            ConstraintViolation: invoice_number belongs to another invoice
        """
        with self._lock:
            current = self._invoices.get(invoice_id)
            if current is None:
                return None

            owner = self._find_by_number(invoice_number)
            if owner is not None and owner.id != invoice_id:
                raise ConstraintViolation(f"Invoice number {invoice_number} already exists in the system")

            updated = current.model_copy(update={
                "invoice_number": invoice_number,
                "bank_name": bank_name,
                "bank_account_number": bank_account_number,
                "beneficiary_name": beneficiary_name,
                "updated_at": _now()
            })
            self._invoices[invoice_id] = updated

        logger.info(f"Updated invoice: {invoice_id}")
        return updated

    def delete(self, invoice_id: int) -> Optional[Invoice]:
        with self._lock:
            removed = self._invoices.pop(invoice_id, None)

        if removed is not None:
            logger.info(f"Deleted invoice: {invoice_id}")
        return removed

    def list_all(self) -> List[Invoice]:
        with self._lock:
            invoices = list(self._invoices.values())
        return sorted(invoices, key=lambda inv: (inv.created_at, inv.id), reverse=True)

    def append_log(self, invoice_number: str, ip_address: str) -> VerificationLogEntry:
        with self._lock:
            entry = VerificationLogEntry(
                id=next(self._log_ids),
                invoice_number=invoice_number,
                ip_address=ip_address,
                verified_at=_now()
            )
            self._logs.append(entry)
        return entry

    def list_logs(self, limit: int = DEFAULT_LOG_LIMIT) -> List[VerificationLogEntry]:
        with self._lock:
            logs = list(self._logs)
        logs.sort(key=lambda entry: (entry.verified_at, entry.id), reverse=True)
        return logs[:max(limit, 0)]
