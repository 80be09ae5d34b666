"""
Admin Key Guard
Single shared secret gating every administrative operation
"""

import logging
from typing import Optional

from api.exceptions import AccessDenied

logger = logging.getLogger(__name__)

SOURCE_QUERY = "query"
SOURCE_BODY = "body"


class AdminKeyGuard:
    """
    Compares the `key` request parameter against the configured admin secret

    The query-string key takes precedence over a body key. No sessions,
    no expiry and no per-user identity.
    """

    def __init__(self, admin_key: Optional[str]):
        self._admin_key = admin_key or None
        if self._admin_key is None:
            logger.warning("ADMIN_KEY is not configured - all admin requests will be denied")

    @property
    def configured(self) -> bool:
        return self._admin_key is not None

    def authorize(self, query_key: Optional[str] = None, body_key: Optional[str] = None) -> str:
        """
        Check the admin key of a request

        Args:
            query_key: `key` from the query string
            body_key: `key` from the request body

        Returns:
            Which source was honored: "query" or "body"

        Raises:
            AccessDenied: Key absent, secret not configured, or key mismatch
        """
        if query_key:
            provided, source = query_key, SOURCE_QUERY
            if body_key and body_key != query_key:
                logger.warning("Admin key in query and body differ - honoring query key")
        else:
            provided, source = body_key, SOURCE_BODY

        if not provided or self._admin_key is None or provided != self._admin_key:
            logger.warning(f"Admin access denied (key source: {source if provided else 'none'})")
            raise AccessDenied("Invalid or missing admin key")

        return source
