"""Request logging middleware"""
from typing import Optional
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("portal.requests")

SKIP_PATHS = ["/health", "/docs", "/openapi.json", "/redoc", "/favicon.ico"]


def client_ip(request: Request) -> str:
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def describe_mutation(method: str, path: str) -> Optional[str]:
    """Short label for the portal actions worth spotting in the log"""
    if method == "GET":
        return None
    if path.startswith("/api/cart/checkout"):
        return "checkout"
    if path.startswith("/api/cart"):
        return "cart_update"
    if path.startswith("/api/appointments"):
        return "appointment_status" if path.endswith("/status") else "appointment_book"
    if path.startswith("/api/symptoms"):
        return "symptom_check"
    if path.startswith("/api/health-records"):
        return "health_record"
    if path.startswith("/api/profiles"):
        return "profile_update"
    if path.startswith("/api/auth/signout"):
        return "signout"
    return None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request: method, path, status and duration"""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if any(path.startswith(skip) for skip in SKIP_PATHS):
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        action = describe_mutation(request.method, path)
        message = f"{request.method} {path} -> {response.status_code} ({elapsed_ms:.1f}ms) from {client_ip(request)}"
        if action:
            message = f"[{action}] {message}"

        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
        return response
