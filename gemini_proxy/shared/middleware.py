import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from gemini_proxy.shared.config import logger


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an ID, times it, and logs one summary line.

    The summary carries the action and upstream model that the proxy endpoints
    record on ``request.state``. Only the path is logged; the query string is not.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request.state.request_id
        response.headers["X-Process-Time"] = str(process_time)

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "Request completed",
            extra={
                "req_id": request.state.request_id,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "action": getattr(request.state, "action", None),
                "upstream_model": getattr(request.state, "upstream_model", None),
                "duration_sec": round(process_time, 4),
            },
        )
        return response
