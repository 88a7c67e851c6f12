"""Request id tagging and access logging."""
import time
import uuid

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from logging_config import bind_context, clear_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with an id and log one line when it finishes.

    The caller's X-Request-ID is reused when present, otherwise a new id is
    generated. It is bound into the structlog context for the duration of
    the request and echoed on the response. Envelopes rendered by the
    exception handlers arrive here as ordinary responses, so TMS failures
    (500) are logged at error level.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        bind_context(request_id=request_id, method=request.method, path=request.url.path)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request raised", duration_ms=_elapsed_ms(started))
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            log = logger.error if response.status_code >= 500 else logger.info
            log("Request handled", status_code=response.status_code, duration_ms=_elapsed_ms(started))
            return response
        finally:
            clear_context()


def setup_middleware(app: FastAPI) -> None:
    """Install the request logging middleware."""
    app.add_middleware(RequestLoggingMiddleware)
