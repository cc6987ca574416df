#!/usr/bin/env python3
"""
Gemini API Proxy
Forwards chat and text-to-speech requests to the Gemini API using a server-held API key.
"""

import uvicorn

from gemini_proxy.app import create_app
from gemini_proxy.shared.config import load_config, setup_logging

# Load and validate configuration once at startup
config = load_config()
logger = setup_logging(config)

app = create_app(config)

if __name__ == "__main__":
    if not config["gemini"]["api_key"]:
        logger.warning("No Gemini API key found in config.yml or GEMINI_API_KEY environment variable.")

    host = config["server"]["host"]
    port = config["server"]["port"]

    logger.warning("Starting Gemini Proxy on %s:%s", host, port)
    logger.warning("Proxy URL: http://%s:%s/api", host, port)
    logger.warning("Metrics: http://%s:%s/metrics", host, port)

    log_config = uvicorn.config.LOGGING_CONFIG
    http_log_level = config["server"].get("http_log_level", "INFO").upper()
    log_config["loggers"]["uvicorn.access"]["level"] = http_log_level

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config=log_config,
        timeout_graceful_shutdown=30,
        server_header=False
    )
