#!/usr/bin/env python3
"""
Configuration module for Gemini API Proxy.
Loads settings from a YAML file and the environment, and initializes logging
with Pydantic validation.
"""

import os
import re
import sys
import logging
from typing import Dict, Any, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from gemini_proxy.shared.utils import mask_key

CONFIG_FILE = os.environ.get("GEMINI_PROXY_CONFIG", "config.yml")
API_KEY_ENV = "GEMINI_API_KEY"


class ServerConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    host: str = "0.0.0.0"
    port: int = 5555
    log_level: str = "INFO"
    http_log_level: str = "INFO"
    cors_origins: List[str] = ["*"]


class GeminiConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    api_key: Optional[str] = None
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float = 600.0
    text_model: str = "gemini-2.5-flash"
    vision_model: str = "gemini-2.5-pro"
    tts_model: str = "gemini-2.5-flash-preview-tts"
    default_voice: str = "Kore"


class RequestProxyConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    enabled: bool = False
    url: Optional[str] = None


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load and validate configuration with Pydantic models.

    A missing config file is not an error: every setting has a default and the
    API key normally comes from the environment.
    """
    path = path or CONFIG_FILE
    config_data: Dict[str, Any] = {}
    try:
        with open(path, encoding="utf-8") as file:
            config_data = yaml.safe_load(file) or {}
    except FileNotFoundError:
        pass
    except yaml.YAMLError as e:
        print(f"Error in configuration file {path}: {e}")
        sys.exit(1)

    # Environment variable override for the API key
    if API_KEY_ENV in os.environ:
        config_data.setdefault("gemini", {})["api_key"] = os.environ[API_KEY_ENV]

    try:
        config_data["server"] = ServerConfig(**config_data.get("server", {})).model_dump()
        config_data["gemini"] = GeminiConfig(**config_data.get("gemini", {})).model_dump()
        config_data["requestProxy"] = RequestProxyConfig(**config_data.get("requestProxy", {})).model_dump()
    except ValidationError as e:
        print(f"Error in configuration: {e}")
        sys.exit(1)

    # An empty key is the same as no key at all
    api_key = (config_data["gemini"].get("api_key") or "").strip()
    config_data["gemini"]["api_key"] = api_key or None
    return config_data


class RedactKeyFilter(logging.Filter):
    """Masks the ``key`` query parameter in URLs that the HTTP client logs."""

    _key_param = re.compile(r"([?&]key=)([^&\s\"']+)")

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._key_param.sub(lambda m: m.group(1) + mask_key(m.group(2)), message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def install_key_redaction() -> None:
    """Attaches RedactKeyFilter to the httpx logger, once."""
    http_logger = logging.getLogger("httpx")
    if not any(isinstance(f, RedactKeyFilter) for f in http_logger.filters):
        http_logger.addFilter(RedactKeyFilter())


def setup_logging(config_: Dict[str, Any]) -> logging.Logger:
    """Configure logging based on validated configuration."""
    log_level = config_["server"]["log_level"]
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level_int,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    install_key_redaction()

    logger_ = logging.getLogger("gemini-proxy")
    logger_.setLevel(log_level_int)
    logger_.info("Logging level set to %s", log_level)
    return logger_


logger = logging.getLogger("gemini-proxy")
