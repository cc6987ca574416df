import json

import httpx
import pytest
from fastapi.testclient import TestClient

from gemini_proxy.app import create_app
from gemini_proxy.shared.config import GeminiConfig, RequestProxyConfig, ServerConfig

API_KEY = "AIzaSyTestKey0000000000000000000wxyz"


def make_config(api_key=API_KEY, **gemini_overrides):
    return {
        "server": ServerConfig().model_dump(),
        "gemini": GeminiConfig(api_key=api_key, **gemini_overrides).model_dump(),
        "requestProxy": RequestProxyConfig().model_dump(),
    }


def text_response(text):
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}
        ]
    }


def audio_response(data="UklGRg==", mime_type="audio/L16;codec=pcm;rate=24000"):
    return {
        "candidates": [
            {"content": {"parts": [{"inlineData": {"mimeType": mime_type, "data": data}}]}}
        ]
    }


class FakeGemini:
    """Records upstream requests and answers them with a configurable responder."""

    def __init__(self):
        self.requests = []
        self.responder = lambda request: httpx.Response(200, json=text_response("hello"))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_model(self) -> str:
        # /v1beta/models/<model>:generateContent
        return self.last_request.url.path.rsplit("/", 1)[-1].split(":", 1)[0]

    @property
    def last_body(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def upstream():
    return FakeGemini()


@pytest.fixture
def make_client(upstream):
    clients = []

    def _make(api_key=API_KEY, raise_server_exceptions=True, **gemini_overrides):
        app = create_app(
            make_config(api_key, **gemini_overrides),
            transport=httpx.MockTransport(upstream),
        )
        client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def keyless_client(make_client):
    return make_client(api_key=None)
