import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with a correlation id and logs its outcome"""

    # Health probes would otherwise flood the log
    quiet_paths = {"/health"}

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"Unhandled error: {request.method} {request.url.path} - Correlation ID: {correlation_id}"
            )
            raise

        response.headers["X-Correlation-ID"] = correlation_id
        if request.url.path not in self.quiet_paths:
            duration = time.time() - start_time
            logger.info(
                f"{request.method} {request.url.path} - Status: {response.status_code} - "
                f"Duration: {duration:.3f}s - Correlation ID: {correlation_id}"
            )
        return response
