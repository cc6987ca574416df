#!/usr/bin/env python3
"""
Dependency provider functions for the application.
"""

from typing import Any, Dict, List

from fastapi import Depends, Request

from gemini_proxy.services.gemini_client import GeminiClient
from gemini_proxy.services.model_router import ModelRoute
from gemini_proxy.shared.errors import ConfigurationError

def get_config(request: Request) -> Dict[str, Any]:
    """Returns the configuration the app was created with."""
    return request.app.state.config

def get_gemini_client(request: Request) -> GeminiClient:
    """Returns the shared GeminiClient instance."""
    return request.app.state.gemini_client

def get_model_routes(request: Request) -> List[ModelRoute]:
    """Returns the ordered model route table."""
    return request.app.state.model_routes

def require_api_key(config: Dict[str, Any] = Depends(get_config)) -> None:
    """Fails every request, whatever its method or body, while no key is set."""
    if not config["gemini"]["api_key"]:
        raise ConfigurationError()
