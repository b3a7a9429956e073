"""
VectorDB: Main entry point for the vector search service.

This module provides the client object that holds credentials and the HTTP
transport, lists namespaces, and hands out namespace objects for writes and
queries.
"""

# Standard library imports
import logging
from typing import Iterator, Optional

# Third-party imports
import httpx

# Local imports
from ._constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, NAMESPACES_PATH
from ._namespace import _Namespace
from ._transport import HttpTransport
from .config import ClientConfig
from .namespace_interface import NamespaceInterface
from .namespace_list import NamespaceList
from .namespace_model import NamespaceModel

logger = logging.getLogger(__name__)


class VectorDB:
    """
    Main class for interacting with the vector search service.

    Provides methods for listing namespaces and accessing namespace data.
    Owns an httpx connection pool unless one is passed in; use it as a
    context manager or call close() when done.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        region: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        config: Optional[ClientConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize a VectorDB instance with the provided connection parameters.

        Args:
            api_key: API key for bearer authentication
            region: Region name, e.g. "gcp-us-central1" (optional)
            base_url: Full service URL, overrides region (optional)
            timeout: HTTP request timeout in seconds (default: 30)
            config: Complete client configuration (optional)
            http_client: Pre-configured httpx client to send requests with (optional)

        Note:
            Pass either `config` or the individual settings, not both.
            With neither region nor base_url the default endpoint is used.

        Raises:
            ValueError: If both config and individual settings are given,
                or no api key is available
        """
        if config is not None:
            if api_key is not None or region is not None or base_url is not None:
                raise ValueError("Cannot specify both config and connection settings")
        elif base_url is not None:
            config = ClientConfig(api_key=api_key, base_url=base_url, timeout=timeout)
        elif region is not None:
            config = ClientConfig.for_region(api_key, region, timeout=timeout)
        else:
            config = ClientConfig(api_key=api_key, base_url=DEFAULT_BASE_URL, timeout=timeout)

        self.config = config
        self.transport = HttpTransport(config, http_client=http_client)
        logger.debug(f"VectorDB client created for {config.base_url}")

    @classmethod
    def from_env(
        cls, region: Optional[str] = None, http_client: Optional[httpx.Client] = None
    ) -> "VectorDB":
        """
        Create a client from TURBOPUFFER_API_KEY and TURBOPUFFER_REGION.

        Args:
            region: Region to use instead of TURBOPUFFER_REGION (optional)
            http_client: Pre-configured httpx client (optional)

        Raises:
            ValueError: If TURBOPUFFER_API_KEY is not set
        """
        return cls(config=ClientConfig.from_env(region), http_client=http_client)

    def close(self) -> None:
        """Release the underlying HTTP connections."""
        self.transport.close()

    def __enter__(self) -> "VectorDB":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def list_namespaces(
        self,
        prefix: Optional[str] = None,
        cursor: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> NamespaceList:
        """
        List one page of namespaces.

        Args:
            prefix: Only list namespaces whose name starts with this prefix
            cursor: Cursor from a previous page's next_cursor
            page_size: Maximum number of namespaces to return

        Returns:
            NamespaceList containing NamespaceModel objects and the cursor
            of the next page (None on the last page)
        """
        if page_size is not None and page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")

        result = self.transport.request(
            "GET",
            NAMESPACES_PATH,
            params={"prefix": prefix, "cursor": cursor, "page_size": page_size},
        )

        # Convert response entries to NamespaceModel objects
        namespaces = [
            NamespaceModel.from_dict(entry) for entry in result.get("namespaces", [])
        ]
        return NamespaceList(namespaces, next_cursor=result.get("next_cursor"))

    def iter_namespaces(
        self, prefix: Optional[str] = None, page_size: Optional[int] = None
    ) -> Iterator[NamespaceModel]:
        """
        Iterate over every namespace, fetching pages as needed.

        Args:
            prefix: Only list namespaces whose name starts with this prefix
            page_size: Number of namespaces fetched per request

        Yields:
            NamespaceModel for each namespace
        """
        cursor = None
        while True:
            page = self.list_namespaces(prefix=prefix, cursor=cursor, page_size=page_size)
            yield from page
            cursor = page.next_cursor
            if not cursor or len(page) == 0:
                return

    def Namespace(self, name: str) -> NamespaceInterface:
        """
        Get an interface for interacting with a specific namespace.

        No request is made; a namespace is created by its first write.

        Args:
            name: Name of the namespace to access

        Returns:
            NamespaceInterface implementation for the specified namespace

        Raises:
            ValidationError: If the name is empty
        """
        return _Namespace(name=name, transport=self.transport)
