"""
Invoice Bank Verification API
Look up the bank account registered for an invoice number; admin endpoints
manage invoice records and expose the verification audit log
"""

from typing import Dict, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.dependencies import get_client_ip
from api.error_codes import ErrorCode
from api.exceptions import InvoiceServiceError
from api.response_formatter import ResponseFormatter
from api.routes.admin_routes import router as admin_router
from api.routes.verification_routes import router as verification_router
from api.storage import InvoiceStore
from config import AppConfig, get_config
from services.admin_guard import AdminKeyGuard
from services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store"
}

HTTP_ERROR_CODES = {
    404: ErrorCode.PAGE_NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    429: ErrorCode.RATE_LIMITED
}


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def error_json(payload: Dict, status_code: int, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """
    Render an error envelope with the security headers

    Unhandled-error responses are produced outside the middleware stack,
    so the headers are attached here rather than left to the middleware.
    """
    response = JSONResponse(status_code=status_code, content=payload, headers=headers)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def create_app(config: Optional[AppConfig] = None, store: Optional[InvoiceStore] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        config: Configuration; loaded from the environment when omitted
        store: Record store; created from config on first use when omitted
    """
    config = config or get_config()

    app = FastAPI(
        title="Invoice Bank Verification API",
        description="Verify the bank account registered for an invoice before paying it",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.state.config = config
    app.state.store = store
    app.state.admin_guard = AdminKeyGuard(config.admin_key)
    app.state.rate_limiter = RateLimiter(config.rate_limit_max, config.rate_limit_window_seconds)

    @app.middleware("http")
    async def limit_request_rate(request: Request, call_next):
        limiter: RateLimiter = request.app.state.rate_limiter
        client_ip = get_client_ip(request)
        if not limiter.allow(client_ip):
            payload, status_code = ResponseFormatter.error_response(ErrorCode.RATE_LIMITED)
            return error_json(payload, status_code, {"Retry-After": str(limiter.retry_after(client_ip))})
        return await call_next(request)

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.exception_handler(InvoiceServiceError)
    async def service_error_handler(request: Request, exc: InvoiceServiceError):
        if exc.__cause__ is not None:
            logger.error(f"{request.method} {request.url.path} failed: {exc} (caused by {exc.__cause__!r})")
        payload, status_code = ResponseFormatter.exception_response(exc)
        return error_json(payload, status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        payload, status_code = ResponseFormatter.error_response(ErrorCode.VALIDATION_FAILED, details=details)
        return error_json(payload, status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        error_code = HTTP_ERROR_CODES.get(exc.status_code)
        if error_code is None:
            payload, _ = ResponseFormatter.error_response(ErrorCode.REQUEST_REJECTED, details=str(exc.detail))
        else:
            payload, _ = ResponseFormatter.error_response(error_code)
        return error_json(payload, exc.status_code, getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unexpected error on {request.method} {request.url.path}")
        payload, status_code = ResponseFormatter.error_response(ErrorCode.INTERNAL_SERVER_ERROR)
        return error_json(payload, status_code)

    app.include_router(verification_router)
    app.include_router(admin_router)

    @app.get("/")
    async def root():
        """Service info"""
        return {
            "status": "online",
            "service": "Invoice Bank Verification API",
            "version": "1.0.0",
            "docs": "/docs",
            "endpoints": {
                "verify": "GET /verify?invoice=<number>",
                "dashboard": "GET /admin?key=<admin key>",
                "logs": "GET /admin/logs?key=<admin key>",
                "get_invoice": "GET /admin/invoices/{id}?key=<admin key>",
                "create": "POST /admin/create",
                "update": "POST /admin/update/{id}",
                "delete": "POST /admin/delete/{id}"
            }
        }

    @app.get("/health")
    async def health_check():
        """Health check"""
        return {
            "status": "healthy",
            "services": {
                "storage": config.store_backend,
                "admin": "configured" if app.state.admin_guard.configured else "disabled"
            }
        }

    return app


settings = get_config()
configure_logging(settings.log_level)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Invoice Bank Verification API...")
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port
    )
