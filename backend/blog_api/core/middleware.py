import logging
import time
from fastapi import FastAPI, Request

logger = logging.getLogger("blog_api.access")

# Mirrors the directives the blog frontend is deployed with
CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "style-src 'self' 'unsafe-inline' https:",
    "script-src 'self' https://apis.google.com https://unpkg.com",
    "img-src 'self' data: https: blob:",
    "connect-src 'self' https:",
])

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def configure_logging(level: str) -> None:
    """Configure root logging once for the process"""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def register_middleware(app: FastAPI) -> None:
    """Attach security headers and access logging to every response"""

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        # Set by get_current_user on authenticated routes
        user_id = getattr(request.state, "user_id", None)
        user_part = f" user={user_id}" if user_id is not None else ""
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{elapsed_ms:.1f}ms{user_part}")
        return response
