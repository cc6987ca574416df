"""
Error types for the proxy and the handlers that render them as JSON.

Every error reaches the client as ``{"error": "<message>"}``. Messages on
500-class errors are fixed strings; upstream details stay in the server log.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gemini_proxy.shared.config import logger


class ProxyError(Exception):
    """Base class for errors that map to a client-visible JSON response."""

    status_code = 500
    default_message = "Internal Proxy Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(ProxyError):
    status_code = 500
    default_message = "Gemini API key is not configured. Please set the GEMINI_API_KEY environment variable."


class MethodNotAllowedError(ProxyError):
    status_code = 405
    default_message = "Method not allowed"


class InvalidRequestError(ProxyError):
    status_code = 400
    default_message = "Invalid request"


class UpstreamContractViolation(ProxyError):
    """The upstream answered, but without a field the proxy depends on."""

    status_code = 500


class UpstreamCallFailure(ProxyError):
    """Network, status or decoding failure while talking to the upstream."""

    status_code = 500
    default_message = "An error occurred while processing your request."


async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Renders framework errors (unknown path etc.) with the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: logs the failure and answers with the generic 500 envelope."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": ProxyError.default_message})
