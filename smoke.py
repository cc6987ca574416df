#!/usr/bin/env python3
"""
Smoke script for a running Gemini API Proxy.
Exercises every endpoint against the real Gemini API using config.yml.
"""

import asyncio
import os
from typing import Callable, Dict, Any

import httpx
import yaml

PROMPT = "Reply with the single word: pong"


def load_config() -> Dict[str, Any]:
    """Load server settings from config.yml, if present"""
    try:
        with open(os.environ.get("GEMINI_PROXY_CONFIG", "config.yml"), encoding="utf-8") as file:
            return yaml.safe_load(file) or {}
    except FileNotFoundError:
        return {}

async def check_feature(feature_name: str, check_func: Callable):
    """Run a feature check with formatted output"""
    print(f"\n=== Checking {feature_name} ===")
    try:
        await check_func()
        print(f"✅ {feature_name} check passed")
    except Exception as e:
        print(f"❌ {feature_name} check failed: {str(e)}")
        raise

async def check_health(client: httpx.AsyncClient, base_url: str):
    resp = await client.get(f"{base_url}/health")
    resp.raise_for_status()
    data = resp.json()
    assert data["status"] == "ok", f"Proxy reports {data}"

async def check_chat_action(client: httpx.AsyncClient, base_url: str):
    request_data = {
        "action": "chat",
        "payload": {"contents": [{"parts": [{"text": PROMPT}]}]},
    }
    resp = await client.post(f"{base_url}/api/chat", json=request_data)
    resp.raise_for_status()
    print(f"Chat answered: {resp.json()['text'].strip()!r}")

async def check_tts_action(client: httpx.AsyncClient, base_url: str):
    request_data = {"action": "tts", "payload": {"text": "Hello there!", "voice": "Kore"}}
    resp = await client.post(f"{base_url}/api/chat", json=request_data)
    resp.raise_for_status()
    data = resp.json()
    print(f"Received {len(data['audioData'])} base64 chars of {data['mimeType']}")

async def check_bare_proxy(client: httpx.AsyncClient, base_url: str):
    request_data = {"contents": [{"parts": [{"text": PROMPT}]}]}
    resp = await client.post(f"{base_url}/api", json=request_data)
    resp.raise_for_status()
    assert resp.json().get("candidates"), "Expected candidates in relayed response"
    print("Relayed generateContent response received")

async def run_checks():
    """Run all feature checks"""
    server_config = load_config().get("server", {})
    host = server_config.get("host", "127.0.0.1")
    host = "127.0.0.1" if host == "0.0.0.0" else host
    port = server_config.get("port", 5555)
    base_url = f"http://{host}:{port}"

    async with httpx.AsyncClient(timeout=60.0) as client:
        await check_feature("Health", lambda: check_health(client, base_url))
        await check_feature("Chat action", lambda: check_chat_action(client, base_url))
        await check_feature("TTS action", lambda: check_tts_action(client, base_url))
        await check_feature("Bare proxy", lambda: check_bare_proxy(client, base_url))

if __name__ == "__main__":
    print("Running Gemini Proxy smoke checks")
    asyncio.run(run_checks())
