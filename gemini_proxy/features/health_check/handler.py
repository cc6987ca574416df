from typing import Any, Dict

from fastapi import Depends
from gemini_proxy.shared.dependencies import get_config
from gemini_proxy.shared.config import logger
from .query import HealthCheckResponse

class HealthCheckHandler:
    def __init__(self, config: Dict[str, Any] = Depends(get_config)):
        self._gemini_config = config["gemini"]

    async def handle(self) -> HealthCheckResponse:
        services_status = {}

        # The key itself is never probed against the API; only its presence is reported.
        if self._gemini_config["api_key"]:
            services_status["gemini_api_key"] = "configured"
        else:
            logger.warning("Health check: GEMINI_API_KEY is not configured")
            services_status["gemini_api_key"] = "missing"

        overall_status = "ok" if services_status["gemini_api_key"] == "configured" else "error"
        return HealthCheckResponse(status=overall_status, services=services_status)
