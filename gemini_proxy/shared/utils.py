import json
from typing import Any, Optional

from fastapi import Request


def mask_key(key: Optional[str]) -> str:
    """Shortens an API key to its first and last four characters for logging."""
    if not key:
        return "<none>"
    if len(key) <= 8:
        return "****"
    return f"{key[:4]}...{key[-4:]}"


async def read_json(request: Request) -> Any:
    """Returns the decoded request body, or None when it is empty, not JSON, or
    nested too deeply to decode."""
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except (ValueError, RecursionError):
        return None
