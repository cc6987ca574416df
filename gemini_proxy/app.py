#!/usr/bin/env python3
"""
Application factory for the Gemini API Proxy.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import httpx
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from gemini_proxy.features.generate.endpoints import router as generate_router
from gemini_proxy.features.health_check.endpoints import router as health_check_router
from gemini_proxy.features.metrics.endpoints import router as metrics_router
from gemini_proxy.features.proxy_generate.endpoints import router as proxy_generate_router
from gemini_proxy.services.gemini_client import GeminiClient
from gemini_proxy.services.model_router import build_routes
from gemini_proxy.shared.config import install_key_redaction, logger
from gemini_proxy.shared.dependencies import require_api_key
from gemini_proxy.shared.errors import (
    ProxyError,
    http_error_handler,
    proxy_error_handler,
    unhandled_error_handler,
)
from gemini_proxy.shared.middleware import RequestLogMiddleware


def create_app(
    config: Dict[str, Any], transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """Builds the app around an already loaded configuration.

    ``transport`` replaces the network layer of the upstream HTTP client.
    """
    install_key_redaction()

    @asynccontextmanager
    async def lifespan(app_: FastAPI):
        client_kwargs: Dict[str, Any] = {"timeout": config["gemini"]["timeout"]}
        if config["requestProxy"]["enabled"] and config["requestProxy"]["url"]:
            proxy_url = config["requestProxy"]["url"]
            client_kwargs["proxy"] = proxy_url
            logger.info("Using proxy for httpx client: %s", proxy_url)
        if transport is not None:
            client_kwargs["transport"] = transport
        app_.state.http_client = httpx.AsyncClient(**client_kwargs)

        app_.state.gemini_client = GeminiClient(
            http_client=app_.state.http_client,
            base_url=config["gemini"]["base_url"],
            api_key=config["gemini"]["api_key"],
        )

        if not config["gemini"]["api_key"]:
            logger.warning("GEMINI_API_KEY is not configured; proxy requests will fail with 500.")
        logger.info("Application startup complete")
        yield
        await app_.state.http_client.aclose()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="Gemini API Proxy",
        description="Proxies requests to the Gemini API without exposing the API key to clients",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.model_routes = build_routes(config["gemini"])

    app.include_router(
        proxy_generate_router,
        dependencies=[Depends(require_api_key)],
        tags=["Proxy"]
    )
    app.include_router(
        generate_router,
        prefix="/api",
        dependencies=[Depends(require_api_key)],
        tags=["Proxy"]
    )
    app.include_router(health_check_router, tags=["Monitoring"])
    app.include_router(metrics_router)

    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config["server"]["cors_origins"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app
