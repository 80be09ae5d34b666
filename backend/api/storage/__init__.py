# Storage package - invoices and verification logs

from config import AppConfig, STORE_BACKEND_MEMORY

from .invoice_store import InMemoryInvoiceStore, InvoiceStore
from .supabase_store import SupabaseInvoiceStore


def create_invoice_store(config: AppConfig) -> InvoiceStore:
    """Build the record store selected by INVOICE_STORE_BACKEND"""
    if config.store_backend == STORE_BACKEND_MEMORY:
        return InMemoryInvoiceStore()
    return SupabaseInvoiceStore(config.supabase_url, config.supabase_key)


__all__ = [
    "InvoiceStore",
    "InMemoryInvoiceStore",
    "SupabaseInvoiceStore",
    "create_invoice_store"
]
