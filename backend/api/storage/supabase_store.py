"""Supabase-based invoice storage (persistent database)"""

from typing import Any, Dict, List, Optional
import logging

import httpx
from postgrest.exceptions import APIError
from supabase import create_client, Client

from api.exceptions import ConfigurationError, ConstraintViolation, StorageUnavailable
from api.models.invoice_model import Invoice, VerificationLogEntry

logger = logging.getLogger(__name__)

INVOICES_TABLE = "invoices"
LOGS_TABLE = "verification_logs"
DEFAULT_LOG_LIMIT = 100

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class SupabaseInvoiceStore:
    """
    Persistent invoice storage using Supabase PostgreSQL

    Every public method issues exactly one PostgREST request; there are no
    multi-statement transactions. Failures are not retried.
    """

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None, client: Optional[Client] = None):
        """Initialize Supabase client"""
        if client is None:
            if not url or not key:
                raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set in environment")
            client = create_client(url, key)

        self.client: Client = client
        logger.info("Supabase invoice store initialized")

    def _execute(self, query, action: str):
        """
        Run a query builder, translating storage errors

        Raises:
            ConstraintViolation: unique constraint on invoice_number violated
            StorageUnavailable: transport or database failure
        """
        try:
            return query.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.info(f"Unique constraint violated while trying to {action}")
                raise ConstraintViolation("Invoice number already exists in the system") from e
            logger.error(f"Database error while trying to {action}: {e.code} {e.message}")
            raise StorageUnavailable("Database query failed") from e
        except httpx.HTTPError as e:
            logger.error(f"Database connection failed while trying to {action}: {e}")
            raise StorageUnavailable("Database connection failed") from e

    @staticmethod
    def _first_invoice(rows: Optional[List[Dict[str, Any]]]) -> Optional[Invoice]:
        if not rows:
            return None
        return Invoice(**rows[0])

    def get_by_number(self, invoice_number: str) -> Optional[Invoice]:
        """
        Get invoice by invoice number

        Args:
            invoice_number: Human-assigned invoice number

        Returns:
            Invoice or None if not found
        """
        query = self.client.table(INVOICES_TABLE).select("*").eq("invoice_number", invoice_number)
        result = self._execute(query, "look up invoice")
        return self._first_invoice(result.data)

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        query = self.client.table(INVOICES_TABLE).select("*").eq("id", invoice_id)
        result = self._execute(query, "load invoice")
        return self._first_invoice(result.data)

    def exists(self, invoice_number: str) -> bool:
        """Check if an invoice number is already registered"""
        query = self.client.table(INVOICES_TABLE).select("id").eq("invoice_number", invoice_number).limit(1)
        result = self._execute(query, "check invoice existence")
        return bool(result.data)

    def create(
        self,
        invoice_number: str,
        bank_name: str,
        bank_account_number: str,
        beneficiary_name: Optional[str] = None
    ) -> Invoice:
        """
        Create new invoice record in database

        Args:
            invoice_number: Unique invoice number
            bank_name: Bank holding the account
            bank_account_number: Account to pay into
            beneficiary_name: Optional account holder

        Returns:
            Created invoice with generated id and timestamps

        Raises:
            ConstraintViolation: invoice_number already exists
        """
        record = {
            "invoice_number": invoice_number,
            "bank_name": bank_name,
            "bank_account_number": bank_account_number,
            "beneficiary_name": beneficiary_name
        }

        result = self._execute(self.client.table(INVOICES_TABLE).insert(record), "create invoice")

        if not result.data:
            raise StorageUnavailable("Failed to create invoice in database")

        invoice = Invoice(**result.data[0])
        logger.info(f"Created invoice in database: {invoice.id} ({invoice_number})")
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
        Update invoice by ID

        updated_at is refreshed by the update_invoices_updated_at trigger.

        Returns:
            Updated invoice, or None if not found
        """
        changes = {
            "invoice_number": invoice_number,
            "bank_name": bank_name,
            "bank_account_number": bank_account_number,
            "beneficiary_name": beneficiary_name
        }

        query = self.client.table(INVOICES_TABLE).update(changes).eq("id", invoice_id)
        invoice = self._first_invoice(self._execute(query, "update invoice").data)

        if invoice is not None:
            logger.info(f"Updated invoice: {invoice_id}")
        return invoice

    def delete(self, invoice_id: int) -> Optional[Invoice]:
        """
        Delete invoice by ID

        Returns:
            The removed invoice, or None if not found
        """
        query = self.client.table(INVOICES_TABLE).delete().eq("id", invoice_id)
        invoice = self._first_invoice(self._execute(query, "delete invoice").data)

        if invoice is not None:
            logger.info(f"Deleted invoice: {invoice_id}")
        return invoice

    def list_all(self) -> List[Invoice]:
        """List all invoices, newest first"""
        query = (
            self.client.table(INVOICES_TABLE)
            .select("*")
            .order("created_at", desc=True)
            .order("id", desc=True)
        )
        result = self._execute(query, "list invoices")
        return [Invoice(**row) for row in result.data or []]

    def append_log(self, invoice_number: str, ip_address: str) -> VerificationLogEntry:
        """Record a verification request"""
        record = {"invoice_number": invoice_number, "ip_address": ip_address}

        result = self._execute(self.client.table(LOGS_TABLE).insert(record), "log verification")

        if not result.data:
            raise StorageUnavailable("Failed to log verification in database")

        return VerificationLogEntry(**result.data[0])

    def list_logs(self, limit: int = DEFAULT_LOG_LIMIT) -> List[VerificationLogEntry]:
        """Most recent verification requests, newest first"""
        query = (
            self.client.table(LOGS_TABLE)
            .select("*")
            .order("verified_at", desc=True)
            .order("id", desc=True)
            .limit(limit)
        )
        result = self._execute(query, "list verification logs")
        return [VerificationLogEntry(**row) for row in result.data or []]
