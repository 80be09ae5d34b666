"""
FastAPI dependencies shared by the route modules
Request guards, store access and client address resolution
"""

from typing import Any, Dict, Optional
import json
import logging
import threading

from fastapi import Depends, Query, Request

from api.storage import InvoiceStore, create_invoice_store
from config import AppConfig
from services.admin_guard import AdminKeyGuard
from services.invoice_validator import InvoiceValidator, get_invoice_validator

logger = logging.getLogger(__name__)

# verification_logs.ip_address is VARCHAR(45)
MAX_IP_LENGTH = 45

_store_lock = threading.Lock()


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_store(request: Request) -> InvoiceStore:
    """Get the application's record store, creating it on first use"""
    state = request.app.state
    if state.store is None:
        with _store_lock:
            if state.store is None:
                state.store = create_invoice_store(state.config)
    return state.store


def get_admin_guard(request: Request) -> AdminKeyGuard:
    return request.app.state.admin_guard


def get_validator() -> InvoiceValidator:
    return get_invoice_validator()


async def read_body_fields(request: Request) -> Dict[str, Any]:
    """
    Read a JSON object or URL-encoded/multipart form body as a dict

    Missing, malformed or non-object bodies yield an empty dict so the
    guards report the missing fields.
    """
    if request.method in ("GET", "HEAD"):
        return {}

    content_type = request.headers.get("content-type", "")

    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Ignoring malformed JSON request body")
            return {}
        return payload if isinstance(payload, dict) else {}

    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return dict(form)

    return {}


def require_admin(
    key: Optional[str] = Query(None, description="Admin key"),
    fields: Dict[str, Any] = Depends(read_body_fields),
    guard: AdminKeyGuard = Depends(get_admin_guard)
) -> str:
    """Admin gate; returns which request source supplied the honored key"""
    body_key = fields.get("key")
    if not isinstance(body_key, str):
        body_key = None
    return guard.authorize(query_key=key, body_key=body_key)


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For entry, else the socket peer, else 'unknown'"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first[:MAX_IP_LENGTH]

    if request.client and request.client.host:
        return request.client.host[:MAX_IP_LENGTH]

    return "unknown"
