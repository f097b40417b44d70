"""Process configuration for the shov-mcp server."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

import aiohttp

from shov_mcp.errors import ConfigurationError

logger = logging.getLogger(__name__)

API_KEY_ENV = "SHOV_API_KEY"
API_KEY_PREFIX = "pk_"
USER_AGENT = "shov-mcp/1.0.0"

# Deadlines are the caller's policy; sessions never time out on their own.
UNBOUNDED_TIMEOUT = aiohttp.ClientTimeout(total=None)


def resolve_base_url(domain: str) -> str:
    """Turn a project domain into the base URL of its API.

    Bare domains get an https:// scheme; explicit http(s) URLs are kept.
    """
    domain = domain.strip()
    base = domain if domain.startswith("http") else f"https://{domain}"
    return base.rstrip("/")


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for one server process.

    Attributes:
        domain: Project domain (e.g. myapp_acme.shov.dev) or full base URL.
        api_key: Bearer credential sent with every tool call.
    """

    domain: str
    api_key: str

    @property
    def base_url(self) -> str:
        return resolve_base_url(self.domain)

    @property
    def manifest_url(self) -> str:
        return f"{self.base_url}/mcp.json"

    @classmethod
    def from_args(
        cls,
        domain: str | None,
        api_key: str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ServerConfig:
        """Build config from CLI values, falling back to the environment for the key.

        Raises:
            ConfigurationError: If the domain or the API key is missing.
        """
        env = os.environ if env is None else env
        if not domain:
            raise ConfigurationError("Domain is required")

        key = api_key or env.get(API_KEY_ENV)
        if not key:
            raise ConfigurationError(
                f"API key is required (use --api-key or set {API_KEY_ENV} env var)"
            )
        if not key.startswith(API_KEY_PREFIX):
            logger.warning('API key should start with "%s" (project key)', API_KEY_PREFIX)

        return cls(domain=domain, api_key=key)
