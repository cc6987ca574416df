from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from gemini_proxy.shared.constants import ANY_METHOD
from gemini_proxy.shared.errors import InvalidRequestError, MethodNotAllowedError
from gemini_proxy.shared.utils import read_json

from .handler import ProxyGenerateHandler

router = APIRouter()

@router.api_route("/api", methods=ANY_METHOD, response_model=None)
async def proxy_generate(
    request: Request,
    handler: ProxyGenerateHandler = Depends(ProxyGenerateHandler)
) -> JSONResponse:
    """Passes a generateContent body through to the model its shape calls for."""
    if request.method != "POST":
        raise MethodNotAllowedError()
    body = await read_json(request)
    if not isinstance(body, dict) or not body:
        raise InvalidRequestError("Request body must be a non-empty JSON object.")
    route = handler.select(body)
    request.state.upstream_model = route.model
    return await handler.handle(body, route)
