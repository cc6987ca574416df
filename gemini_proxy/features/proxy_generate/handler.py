# gemini_proxy/features/proxy_generate/handler.py
from typing import Any, Dict, List

import httpx
from fastapi import Depends
from fastapi.responses import JSONResponse

from gemini_proxy.services.gemini_client import GeminiClient
from gemini_proxy.services.model_router import ModelRoute, select_route
from gemini_proxy.shared.config import logger
from gemini_proxy.shared.dependencies import get_gemini_client, get_model_routes
from gemini_proxy.shared.errors import UpstreamCallFailure

COMMUNICATION_FAILURE_MESSAGE = "Failed to communicate with the Gemini API."


class ProxyGenerateHandler:
    """Forwards a generateContent body untouched and relays the upstream answer."""

    def __init__(
        self,
        gemini_client: GeminiClient = Depends(get_gemini_client),
        routes: List[ModelRoute] = Depends(get_model_routes),
    ):
        self._client = gemini_client
        self._routes = routes

    def select(self, body: Dict[str, Any]) -> ModelRoute:
        route = select_route(body, self._routes)
        logger.info("Selected '%s' route, model '%s'.", route.name, route.model)
        return route

    async def handle(self, body: Dict[str, Any], route: ModelRoute) -> JSONResponse:
        try:
            response = await self._client.generate_content(route.model, body)
            # Rendering fails on values JSON cannot carry, such as NaN
            return JSONResponse(content=response.json(), status_code=response.status_code)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error during API call: %s", e)
            raise UpstreamCallFailure(COMMUNICATION_FAILURE_MESSAGE) from e
