import time
from uuid import uuid4
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from remote_shell.core.logger import logger

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - start_time
        logger.debug(
            f"[HTTP] {request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed:.3f}s) request_id={request_id}"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
