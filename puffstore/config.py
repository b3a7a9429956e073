"""Configuration for the puffstore client."""

import os
from dataclasses import dataclass
from typing import Optional

from ._constants import (
    API_KEY_ENV,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    REGION_BASE_URL,
    REGION_ENV,
    TIMEOUT_ENV,
)


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for the service.

    Values can be passed directly, derived from a region name, or read from
    environment variables with ``from_env``.
    """

    api_key: str
    """API key sent as a bearer token"""

    base_url: str = DEFAULT_BASE_URL
    """Service URL without a trailing slash"""

    timeout: float = DEFAULT_TIMEOUT
    """HTTP request timeout in seconds"""

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("api_key must be a non-empty string")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def for_region(
        cls, api_key: str, region: str, timeout: float = DEFAULT_TIMEOUT
    ) -> "ClientConfig":
        """Create a config pointing at a regional endpoint, e.g. "gcp-us-central1"."""
        return cls(
            api_key=api_key,
            base_url=REGION_BASE_URL.format(region=region),
            timeout=timeout,
        )

    @classmethod
    def from_env(cls, region: Optional[str] = None) -> "ClientConfig":
        """Create config from environment variables.

        Environment variables:
        - TURBOPUFFER_API_KEY: API key (required)
        - TURBOPUFFER_REGION: region name; the default endpoint is used when unset
        - TURBOPUFFER_TIMEOUT: request timeout in seconds

        Args:
            region: Region to use instead of TURBOPUFFER_REGION

        Raises:
            ValueError: If TURBOPUFFER_API_KEY is not set
        """
        api_key = os.getenv(API_KEY_ENV)
        if not api_key:
            raise ValueError(f"{API_KEY_ENV} not set")

        timeout = float(os.getenv(TIMEOUT_ENV, DEFAULT_TIMEOUT))
        region = region or os.getenv(REGION_ENV)
        if region:
            return cls.for_region(api_key, region, timeout=timeout)
        return cls(api_key=api_key, timeout=timeout)
