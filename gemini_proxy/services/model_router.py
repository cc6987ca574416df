"""
Model selection for the bare proxy endpoint.

The request body is matched against an ordered table of routes; the first
route whose predicate accepts the body decides the upstream model. The table
ends with a catch-all route to the default text model.
"""

from typing import Any, Callable, Dict, List, NamedTuple


class ModelRoute(NamedTuple):
    name: str
    predicate: Callable[[Dict[str, Any]], bool]
    model: str


def wants_audio(body: Dict[str, Any]) -> bool:
    """True when generationConfig.responseModalities asks for AUDIO."""
    generation_config = body.get("generationConfig")
    if not isinstance(generation_config, dict):
        return False
    modalities = generation_config.get("responseModalities")
    if not isinstance(modalities, list):
        return False
    return "AUDIO" in modalities


def _carries_inline_data(item: Any) -> bool:
    return isinstance(item, dict) and bool(item.get("inlineData") or item.get("inline_data"))


def has_inline_data(body: Dict[str, Any]) -> bool:
    """True when any content, or any part of a content, embeds binary data."""
    contents = body.get("contents")
    if not isinstance(contents, list):
        return False
    for content in contents:
        if _carries_inline_data(content):
            return True
        parts = content.get("parts") if isinstance(content, dict) else None
        if isinstance(parts, list) and any(_carries_inline_data(part) for part in parts):
            return True
    return False


def matches_anything(body: Dict[str, Any]) -> bool:
    return True


def build_routes(gemini_config: Dict[str, Any]) -> List[ModelRoute]:
    """Builds the route table from the ``gemini`` config section. Order matters;
    the catch-all default route must stay last."""
    return [
        ModelRoute("audio", wants_audio, gemini_config["tts_model"]),
        ModelRoute("vision", has_inline_data, gemini_config["vision_model"]),
        ModelRoute("default", matches_anything, gemini_config["text_model"]),
    ]


def select_route(body: Dict[str, Any], routes: List[ModelRoute]) -> ModelRoute:
    for route in routes:
        if route.predicate(body):
            return route
    raise LookupError("No model route accepts the request body")
