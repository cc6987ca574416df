from fastapi import APIRouter, Depends, Request

from gemini_proxy.shared.constants import ANY_METHOD
from gemini_proxy.shared.errors import MethodNotAllowedError
from gemini_proxy.shared.utils import read_json

from .command import ChatResponse, TTSResponse, parse_action_request
from .handler import GenerateHandler

router = APIRouter()

@router.api_route("/chat", methods=ANY_METHOD, response_model=None)
async def generate(
    request: Request,
    handler: GenerateHandler = Depends(GenerateHandler)
) -> ChatResponse | TTSResponse:
    if request.method != "POST":
        raise MethodNotAllowedError()
    command = parse_action_request(await read_json(request))
    request.state.action = command.action
    request.state.upstream_model = handler.model_for(command.action)
    return await handler.handle(command)
