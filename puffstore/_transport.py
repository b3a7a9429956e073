"""
HTTP transport for the puffstore client.

Sends JSON requests with bearer authentication through an ``httpx.Client``
and returns the decoded JSON body. Non-2xx responses become ``ApiError`` and
network failures become ``TransportError``; nothing is retried here.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from .config import ClientConfig
from .errors import ApiError, TransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """JSON-over-HTTPS transport bound to one service endpoint."""

    def __init__(
        self, config: ClientConfig, http_client: Optional[httpx.Client] = None
    ) -> None:
        """
        Initialize the transport.

        Args:
            config: Endpoint, credentials and timeout
            http_client: Pre-configured httpx client to use (optional). When
                omitted a client is created and owned by this transport.
        """
        self.config = config
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=config.timeout)

    def _build_headers(self) -> Dict[str, str]:
        """Build request headers."""
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def request(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON response.

        Args:
            method: HTTP method
            path: Path below the base URL, starting with "/"
            body: JSON body (optional)
            params: Query string parameters; None values are dropped

        Returns:
            Decoded JSON response, or an empty dict for an empty body

        Raises:
            ApiError: If the service answers with a non-2xx status
            TransportError: If no response was received
        """
        url = f"{self.config.base_url}{path}"
        content = None
        if body is not None:
            content = json.dumps(body, separators=(",", ":"), allow_nan=False)
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        logger.debug(f"{method} {path}")
        try:
            response = self.http_client.request(
                method,
                url,
                content=content,
                params=params or None,
                headers=self._build_headers(),
            )
        except httpx.TransportError as e:
            raise TransportError(url, e) from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        if not response.is_success:
            raise ApiError(response.status_code, response.text)

        return self._parse_response(response)

    def _parse_response(self, response: httpx.Response) -> Any:
        """Decode a successful response body."""
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                response.status_code, f"Invalid JSON in response: {response.text}"
            ) from e

    def close(self) -> None:
        """Close the underlying httpx client if this transport created it."""
        if self._owns_client:
            self.http_client.close()
