import httpx
import pytest

from conftest import API_KEY, audio_response, text_response

CHAT_URL = "/api/chat"
GENERIC_ERROR = "An error occurred while processing your request."


@pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE"])
@pytest.mark.parametrize(
    "body",
    [
        None,
        {"action": "chat", "payload": {"contents": [{"parts": [{"text": "hi"}]}]}},
        {"action": "nope"},
    ],
)
def test_missing_api_key_is_500_for_any_request(keyless_client, upstream, method, body):
    resp = keyless_client.request(method, CHAT_URL, json=body)

    assert resp.status_code == 500
    assert "not configured" in resp.json()["error"]
    assert upstream.requests == []


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
def test_non_post_is_405(client, method):
    resp = client.request(method, CHAT_URL)

    assert resp.status_code == 405
    assert resp.json() == {"error": "Method not allowed"}


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"action": "chat"},
        {"payload": {"contents": []}},
        {"action": "", "payload": {"contents": []}},
        {"action": "tts", "payload": None},
        ["chat"],
    ],
)
def test_missing_action_or_payload_is_400(client, upstream, body):
    resp = client.post(CHAT_URL, json=body)

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing `action` or `payload` in request body"}
    assert upstream.requests == []


def test_invalid_json_body_is_400(client):
    resp = client.post(CHAT_URL, content=b"{not json", headers={"Content-Type": "application/json"})

    assert resp.status_code == 400


@pytest.mark.parametrize("action", ["image", "CHAT", 42])
def test_unknown_action_is_400(client, upstream, action):
    resp = client.post(CHAT_URL, json={"action": action, "payload": {"text": "hi"}})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid action"}
    assert upstream.requests == []


def test_chat_returns_upstream_text(client, upstream):
    payload = {"contents": [{"parts": [{"text": "hi"}]}]}

    resp = client.post(CHAT_URL, json={"action": "chat", "payload": payload})

    assert resp.status_code == 200
    assert resp.json() == {"text": "hello"}
    assert upstream.last_model == "gemini-2.5-flash"
    assert upstream.last_body == payload
    assert upstream.last_request.url.params["key"] == API_KEY


def test_chat_joins_all_text_parts(client, upstream):
    upstream.responder = lambda request: httpx.Response(200, json={
        "candidates": [{"content": {"parts": [{"text": "hel"}, {"text": "lo"}]}}]
    })

    resp = client.post(CHAT_URL, json={"action": "chat", "payload": {"contents": []}})

    assert resp.json() == {"text": "hello"}


def test_chat_accepts_string_prompt(client, upstream):
    resp = client.post(CHAT_URL, json={"action": "chat", "payload": "hi there"})

    assert resp.status_code == 200
    assert upstream.last_body == {"contents": [{"role": "user", "parts": [{"text": "hi there"}]}]}


def test_chat_with_non_object_payload_is_400(client):
    resp = client.post(CHAT_URL, json={"action": "chat", "payload": [1, 2]})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid payload for action 'chat'"}


def test_chat_blocked_prompt_is_generic_500(client, upstream):
    upstream.responder = lambda request: httpx.Response(
        200, json={"promptFeedback": {"blockReason": "SAFETY"}}
    )

    resp = client.post(CHAT_URL, json={"action": "chat", "payload": {"contents": []}})

    assert resp.status_code == 500
    assert resp.json() == {"error": GENERIC_ERROR}


def test_tts_returns_audio(client, upstream):
    upstream.responder = lambda request: httpx.Response(200, json=audio_response("AAAA", "audio/wav"))

    resp = client.post(CHAT_URL, json={"action": "tts", "payload": {"text": "hi", "voice": "Puck"}})

    assert resp.status_code == 200
    assert resp.json() == {"audioData": "AAAA", "mimeType": "audio/wav"}
    assert upstream.last_model == "gemini-2.5-flash-preview-tts"
    assert upstream.last_body == {
        "contents": [{"parts": [{"text": "hi"}]}],
        "generationConfig": {
            "responseModalities": ["AUDIO"],
            "speechConfig": {"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": "Puck"}}},
        },
    }


def test_tts_without_voice_uses_default_voice(client, upstream):
    upstream.responder = lambda request: httpx.Response(200, json=audio_response())

    client.post(CHAT_URL, json={"action": "tts", "payload": {"text": "hi"}})

    voice = upstream.last_body["generationConfig"]["speechConfig"]["voiceConfig"]
    assert voice == {"prebuiltVoiceConfig": {"voiceName": "Kore"}}


def test_tts_without_inline_audio_is_500(client, upstream):
    upstream.responder = lambda request: httpx.Response(200, json=text_response("no audio here"))

    resp = client.post(CHAT_URL, json={"action": "tts", "payload": {"text": "hi", "voice": "Kore"}})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to generate TTS audio."}


def test_tts_with_empty_candidates_is_500(client, upstream):
    upstream.responder = lambda request: httpx.Response(200, json={"candidates": []})

    resp = client.post(CHAT_URL, json={"action": "tts", "payload": {"text": "hi", "voice": "Kore"}})

    assert resp.json() == {"error": "Failed to generate TTS audio."}


@pytest.mark.parametrize("payload", [{"voice": "Kore"}, {"text": ""}, "just text"])
def test_tts_with_invalid_payload_is_400(client, upstream, payload):
    resp = client.post(CHAT_URL, json={"action": "tts", "payload": payload})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid payload for action 'tts'"}
    assert upstream.requests == []


def test_network_error_is_generic_500_without_detail(client, upstream):
    def refuse(request):
        raise httpx.ConnectError("connection refused by internal-host-17", request=request)

    upstream.responder = refuse

    resp = client.post(CHAT_URL, json={"action": "chat", "payload": {"contents": []}})

    assert resp.status_code == 500
    assert resp.json() == {"error": GENERIC_ERROR}
    assert "internal-host-17" not in resp.text


def test_upstream_error_status_is_generic_500(client, upstream):
    upstream.responder = lambda request: httpx.Response(
        400, json={"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}}
    )

    resp = client.post(CHAT_URL, json={"action": "chat", "payload": {"contents": []}})

    assert resp.status_code == 500
    assert resp.json() == {"error": GENERIC_ERROR}
    assert API_KEY not in resp.text


def test_non_json_upstream_is_generic_500(client, upstream):
    upstream.responder = lambda request: httpx.Response(200, text="<html>gateway</html>")

    resp = client.post(CHAT_URL, json={"action": "chat", "payload": {"contents": []}})

    assert resp.status_code == 500
    assert resp.json() == {"error": GENERIC_ERROR}


def test_failed_request_does_not_affect_the_next_one(client, upstream):
    def refuse(request):
        raise httpx.ReadTimeout("timed out", request=request)

    upstream.responder = refuse
    assert client.post(CHAT_URL, json={"action": "chat", "payload": "hi"}).status_code == 500

    upstream.responder = lambda request: httpx.Response(200, json=text_response("back"))
    resp = client.post(CHAT_URL, json={"action": "chat", "payload": "hi"})

    assert resp.json() == {"text": "back"}


def test_deeply_nested_body_is_400(client, upstream):
    depth = 100_000
    content = b'{"action": "chat", "payload": ' + b"[" * depth + b"]" * depth + b"}"

    resp = client.post(CHAT_URL, content=content, headers={"Content-Type": "application/json"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing `action` or `payload` in request body"}
    assert upstream.requests == []
