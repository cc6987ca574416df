from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from gemini_proxy.shared.errors import InvalidRequestError

CHAT_ACTION = "chat"
TTS_ACTION = "tts"
ACTIONS = (CHAT_ACTION, TTS_ACTION)

MISSING_FIELDS_MESSAGE = "Missing `action` or `payload` in request body"


class TTSPayload(BaseModel):
    text: str = Field(..., min_length=1)
    voice: Optional[str] = None


class ActionRequest(BaseModel):
    action: Literal["chat", "tts"]
    payload: Any


class ChatResponse(BaseModel):
    text: str


class TTSResponse(BaseModel):
    audioData: str
    mimeType: str


def _is_blank(value: Any) -> bool:
    return value is None or value is False or value == ""


def parse_action_request(body: Any) -> ActionRequest:
    """Validates a decoded body into an ActionRequest.

    The ``chat`` payload is normalised to a generateContent request: objects
    pass through untouched and a bare string becomes a single user turn.
    """
    if not isinstance(body, dict) or _is_blank(body.get("action")) or _is_blank(body.get("payload")):
        raise InvalidRequestError(MISSING_FIELDS_MESSAGE)

    action = body["action"]
    if action not in ACTIONS:
        raise InvalidRequestError("Invalid action")

    payload = body["payload"]
    if action == CHAT_ACTION:
        if isinstance(payload, str):
            payload = {"contents": [{"role": "user", "parts": [{"text": payload}]}]}
        elif not isinstance(payload, dict):
            raise InvalidRequestError(f"Invalid payload for action '{action}'")
    else:
        try:
            payload = TTSPayload.model_validate(payload)
        except ValidationError:
            raise InvalidRequestError(f"Invalid payload for action '{action}'")

    return ActionRequest(action=action, payload=payload)


def build_tts_request(payload: TTSPayload, default_voice: str) -> Dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": payload.text}]}],
        "generationConfig": {
            "responseModalities": ["AUDIO"],
            "speechConfig": {
                "voiceConfig": {
                    "prebuiltVoiceConfig": {"voiceName": payload.voice or default_voice}
                }
            },
        },
    }
