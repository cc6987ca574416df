# gemini_proxy/features/generate/handler.py
from typing import Any, Dict

from fastapi import Depends

from gemini_proxy.services.gemini_client import GeminiClient
from gemini_proxy.shared.config import logger
from gemini_proxy.shared.dependencies import get_config, get_gemini_client
from gemini_proxy.shared.errors import ProxyError, UpstreamCallFailure, UpstreamContractViolation

from .command import (
    CHAT_ACTION,
    TTS_ACTION,
    ActionRequest,
    ChatResponse,
    TTSPayload,
    TTSResponse,
    build_tts_request,
)

TTS_FAILURE_MESSAGE = "Failed to generate TTS audio."


def _first_candidate_parts(data: Dict[str, Any]) -> list:
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return []
    content = candidates[0].get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    return parts if isinstance(parts, list) else []


def extract_text(data: Dict[str, Any]) -> str:
    """Joins the text of every part of the first candidate."""
    texts = [
        part["text"] for part in _first_candidate_parts(data)
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    ]
    if not texts:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        raise ValueError(f"Gemini response carried no text (blockReason={block_reason})")
    return "".join(texts)


class GenerateHandler:
    """Dispatches an action request to the matching Gemini model."""

    def __init__(
        self,
        gemini_client: GeminiClient = Depends(get_gemini_client),
        config: Dict[str, Any] = Depends(get_config),
    ):
        self._client = gemini_client
        self._gemini_config = config["gemini"]

    def model_for(self, action: str) -> str:
        if action == CHAT_ACTION:
            return self._gemini_config["text_model"]
        return self._gemini_config["tts_model"]

    async def handle(self, command: ActionRequest) -> ChatResponse | TTSResponse:
        try:
            if command.action == CHAT_ACTION:
                return await self._chat(command.payload)
            return await self._tts(command.payload)
        except ProxyError:
            raise
        except Exception as e:
            logger.error("API Error: %s", e)
            raise UpstreamCallFailure() from e

    async def _chat(self, payload: Dict[str, Any]) -> ChatResponse:
        data = await self._client.generate_json(self.model_for(CHAT_ACTION), payload)
        return ChatResponse(text=extract_text(data))

    async def _tts(self, payload: TTSPayload) -> TTSResponse:
        request_data = build_tts_request(payload, self._gemini_config["default_voice"])
        data = await self._client.generate_json(self.model_for(TTS_ACTION), request_data)

        parts = _first_candidate_parts(data)
        inline_data = (parts[0].get("inlineData") if parts and isinstance(parts[0], dict) else None) or {}
        audio_data = inline_data.get("data")
        mime_type = inline_data.get("mimeType")
        if not audio_data or not mime_type:
            logger.error("TTS response from Gemini carried no inline audio.")
            raise UpstreamContractViolation(TTS_FAILURE_MESSAGE)
        return TTSResponse(audioData=audio_data, mimeType=mime_type)
