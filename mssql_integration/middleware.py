"""
Name: HTTP Middleware

Responsibilities:
  - Carry the caller's X-Request-Id (or a new UUID) through the request
  - Set request context for logging
  - Log one line per request with status and latency

Collaborators:
  - context.py: ContextVars for request-scoped data
  - logger.py: Structured logging

Constraints:
  - Must clear context after response
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .context import (
    clear_context,
    http_method_var,
    http_path_var,
    request_id_var,
)
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """R: Binds the request id to every log line of the request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        # R: The bot platform may send its own id; keep it for correlation
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_id_var.set(request_id)
        http_method_var.set(request.method)
        http_path_var.set(request.url.path)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request failed", extra={"latency_ms": _elapsed_ms(started)}
            )
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "request completed",
                extra={
                    "status_code": response.status_code,
                    "latency_ms": _elapsed_ms(started),
                },
            )
            return response
        finally:
            clear_context()
