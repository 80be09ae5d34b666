"""
Application configuration
Resolved once at startup from environment variables (optionally a .env file)
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

STORE_BACKEND_SUPABASE = "supabase"
STORE_BACKEND_MEMORY = "memory"
STORE_BACKENDS = {STORE_BACKEND_SUPABASE, STORE_BACKEND_MEMORY}

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
DEFAULT_ADMIN_LOG_LIMIT = 50
DEFAULT_RATE_LIMIT_MAX = 100
DEFAULT_RATE_LIMIT_WINDOW_SECONDS = 15 * 60


def env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not an integer, using {default}")
        return default
    return value if value >= minimum else default


@dataclass(frozen=True)
class AppConfig:
    """
    Process-wide configuration

    - supabase_url / supabase_key: record store connection
    - admin_key: shared secret for admin endpoints
    - store_backend: "supabase" (default) or "memory"
    - rate_limit_max: requests per client per window, 0 disables the limit
    """
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    admin_key: Optional[str] = None
    store_backend: str = STORE_BACKEND_SUPABASE
    log_level: str = "INFO"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    admin_log_limit: int = DEFAULT_ADMIN_LOG_LIMIT
    rate_limit_max: int = DEFAULT_RATE_LIMIT_MAX
    rate_limit_window_seconds: int = DEFAULT_RATE_LIMIT_WINDOW_SECONDS

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build configuration from environment variables"""
        load_dotenv()

        backend = os.getenv("INVOICE_STORE_BACKEND", STORE_BACKEND_SUPABASE).strip().lower()
        if backend not in STORE_BACKENDS:
            logger.warning(f"Unknown INVOICE_STORE_BACKEND {backend!r}, using {STORE_BACKEND_SUPABASE}")
            backend = STORE_BACKEND_SUPABASE

        return cls(
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_key=os.getenv("SUPABASE_KEY") or None,
            admin_key=os.getenv("ADMIN_KEY") or None,
            store_backend=backend,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            host=os.getenv("HOST", DEFAULT_HOST),
            port=env_int("PORT", DEFAULT_PORT),
            admin_log_limit=env_int("ADMIN_LOG_LIMIT", DEFAULT_ADMIN_LOG_LIMIT),
            rate_limit_max=env_int("RATE_LIMIT_MAX", DEFAULT_RATE_LIMIT_MAX, minimum=0),
            rate_limit_window_seconds=env_int("RATE_LIMIT_WINDOW_SECONDS", DEFAULT_RATE_LIMIT_WINDOW_SECONDS)
        )


# Singleton instance
_config = None

def get_config() -> AppConfig:
    """Get or load application configuration"""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config
