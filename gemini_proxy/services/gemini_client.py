# gemini_proxy/services/gemini_client.py
import time
from typing import Any, Dict, Optional

import httpx

from gemini_proxy.shared.config import logger
from gemini_proxy.shared.metrics import UPSTREAM_ERRORS, UPSTREAM_LATENCY, UPSTREAM_REQUESTS
from gemini_proxy.shared.utils import mask_key


class GeminiAPIError(Exception):
    """Non-2xx answer from the Gemini API.

    The message carries the status and a slice of the body, never the request
    URL, because the URL holds the API key.
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Gemini API returned {status_code}: {body[:500]}")


class GeminiClient:
    """Sends generateContent requests to the Gemini API with the server-held key."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str, api_key: Optional[str]):
        self._client = http_client
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key

    def endpoint(self, model: str) -> str:
        return f"{self._base_url}/models/{model}:generateContent"

    async def generate_content(self, model: str, body: Dict[str, Any]) -> httpx.Response:
        """POSTs the body as-is and returns the raw response, whatever its status."""
        logger.info("Forwarding generateContent to model '%s' with key %s.", model, mask_key(self._api_key))
        UPSTREAM_REQUESTS.labels(model=model).inc()
        start_time = time.time()
        try:
            response = await self._client.post(
                self.endpoint(model),
                params={"key": self._api_key},
                json=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.RequestError as e:
            UPSTREAM_ERRORS.labels(model=model, reason="network").inc()
            logger.error("Request error talking to Gemini (%s): %s", type(e).__name__, e)
            raise
        finally:
            UPSTREAM_LATENCY.labels(model=model).observe(time.time() - start_time)

        if response.is_error:
            UPSTREAM_ERRORS.labels(model=model, reason="status").inc()
            logger.warning("Gemini model '%s' answered with status %s.", model, response.status_code)
        return response

    async def generate_json(self, model: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """POSTs the body and returns the decoded JSON of a successful response.

        Raises GeminiAPIError on a non-2xx status, httpx.RequestError on network
        failure and ValueError when the body is not a JSON object.
        """
        response = await self.generate_content(model, body)
        if response.is_error:
            raise GeminiAPIError(response.status_code, response.text)
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object from Gemini, got {type(data).__name__}")
        return data
