"""
Configuration Module for the bsvalias client

Settings are loaded from environment variables through pydantic-settings, with
defaults that work against the public Cloudflare DNS-over-HTTPS endpoint.

Key configuration areas include:
- Debugging and error reporting
- Service location (DoH endpoint, SRV resolver variant)
- HTTP transport behaviour
"""

import json
import logging
import os
from logging.config import dictConfig
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Client settings.

    Environment variables are mapped onto fields by name, for example
    DOH_HOSTNAME sets doh_hostname.
    """

    debug: bool = False
    """
    Enable verbose logging.
    Set with DEBUG=true environment variable.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    srv_resolver: Literal["doh", "dns"] = "doh"
    """
    Which SRV resolver to use. "doh" queries a DNS-over-HTTPS JSON endpoint and
    honours the authenticated data flag, "dns" uses plain DNS and never reports
    a secure domain.
    Set with SRV_RESOLVER environment variable.
    """

    doh_hostname: str = "cloudflare-dns.com"
    """
    Hostname of the DNS-over-HTTPS JSON endpoint.
    Set with DOH_HOSTNAME environment variable.
    """

    doh_path: str = "/dns-query"
    """
    Path of the DNS-over-HTTPS JSON endpoint.
    Set with DOH_PATH environment variable.
    """

    request_timeout: float = 10.0
    """
    Total timeout in seconds for each HTTP request.
    Set with REQUEST_TIMEOUT environment variable.
    """

    user_agent: str = "bsvalias-client/1.0"
    """User-Agent header sent with every request"""

    @field_validator("request_timeout")
    @classmethod
    def check_request_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be greater than zero")
        return v

    @field_validator("doh_path")
    @classmethod
    def check_doh_path(cls, v: str) -> str:
        if not v.startswith("/"):
            return f"/{v}"
        return v


def configure_logging(settings: Optional[Settings] = None) -> None:
    logging_config_file = os.getenv("LOGGING_CONFIG_FILE", "")

    if len(logging_config_file) > 0:
        with open(logging_config_file) as fl:
            dictConfig(json.load(fl))
        return

    logging.basicConfig()
    if settings is not None and settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)
