"""
Internal implementation of namespace operations.

This module provides the _Namespace class that implements the
NamespaceInterface by turning each operation into one request against the
service's namespace endpoints.
"""

# Standard library imports
import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Union

# Local imports
from ._constants import (
    HINT_CACHE_WARM_SUFFIX,
    ID_FIELD,
    METADATA_SUFFIX,
    QUERY_SUFFIX,
    SCHEMA_SUFFIX,
    _get_namespace_path,
)
from ._transport import HttpTransport
from .errors import ValidationError
from .filter import Filter
from .metric import DistanceMetric
from .namespace_interface import NamespaceInterface
from .request import QueryRequest, WriteRequest
from .response import (
    HintCacheWarmTypedDict,
    NamespaceMetadataTypedDict,
    QueryResponseTypedDict,
    RowTypedDict,
    SchemaTypedDict,
    WriteResponseTypedDict,
)
from .row import RowId, RowLike

logger = logging.getLogger(__name__)


def _get_request(request_type, request, kwargs):
    """Use the given request, or build one from keyword arguments."""
    if request is None:
        return request_type(**kwargs)
    if kwargs:
        raise ValueError(
            f"Cannot pass both a {request_type.__name__} and keyword arguments"
        )
    if not isinstance(request, request_type):
        raise ValidationError(
            f"Expected {request_type.__name__}, got {type(request).__name__}"
        )
    return request


class _Namespace(NamespaceInterface):
    """
    Internal implementation of namespace operations over HTTP.

    Holds no state besides its name and the shared transport, so instances
    are cheap and safe to create per call site.
    """

    def __init__(self, *, name: str, transport: HttpTransport) -> None:
        """
        Initialize the namespace.

        Args:
            name: Namespace name
            transport: Transport used for every request

        Raises:
            ValidationError: If the name is empty or not a string
        """
        if not isinstance(name, str) or not name:
            raise ValidationError(f"Namespace name must be a non-empty string, got {name!r}")
        self._name = name
        self.transport = transport

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Namespace(name={self._name!r})"

    def _get_path(self, suffix: str = "", version: str = "v2") -> str:
        return _get_namespace_path(self._name, version) + suffix

    def write(
        self, request: Optional[WriteRequest] = None, **kwargs
    ) -> WriteResponseTypedDict:
        request = _get_request(WriteRequest, request, kwargs)
        result = self.transport.request("POST", self._get_path(), body=request.to_dict())
        logger.debug(
            f"Wrote to namespace {self._name}: {result.get('rows_affected', 0)} rows affected"
        )
        return result

    def upsert(
        self,
        rows: List[RowLike],
        distance_metric: Optional[Union[DistanceMetric, str]] = None,
        schema: Optional[Mapping[str, Any]] = None,
    ) -> int:
        if not rows:
            return 0

        result = self.write(
            upsert_rows=rows, distance_metric=distance_metric, schema=schema
        )
        return result.get("rows_affected", 0)

    def upsert_from_dataframe(
        self,
        df: Any,
        distance_metric: Optional[Union[DistanceMetric, str]] = None,
        batch_size: int = 500,
    ) -> int:
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        result = 0
        # Process DataFrame in batches
        for i in range(0, len(df), batch_size):
            batch = df.iloc[i : i + batch_size]
            rows = []

            # Convert DataFrame rows to flat row dicts, missing values become null.
            # Records keep each column's dtype, so integer ids stay integers.
            for record in batch.to_dict(orient="records"):
                rows.append(
                    {
                        column: None
                        if isinstance(value, float) and math.isnan(value)
                        else value
                        for column, value in record.items()
                    }
                )

            # Upsert the batch
            result += self.upsert(rows, distance_metric=distance_metric)

        return result

    def patch(self, rows: List[RowLike]) -> int:
        if not rows:
            return 0
        return self.write(patch_rows=rows).get("rows_affected", 0)

    def delete(
        self,
        ids: Optional[List[RowId]] = None,
        filter: Optional[Filter] = None,
    ) -> int:
        # Validate inputs
        has_ids = ids is not None and len(ids) > 0
        has_filter = filter is not None

        if not has_ids and not has_filter:
            raise ValueError("Must specify ids or filter to delete rows")

        result = self.write(
            deletes=ids if has_ids else None,
            delete_by_filter=filter,
        )
        return result.get("rows_affected", 0)

    def delete_all(self) -> None:
        self.transport.request("DELETE", self._get_path())
        logger.debug(f"Deleted namespace {self._name}")

    def fetch(self, ids: List[RowId]) -> Dict[RowId, RowTypedDict]:
        if not ids:
            return {}

        # Query by id; every attribute is returned
        response = self.query(
            filters=Filter.in_(ID_FIELD, ids),
            top_k=len(ids),
            include_attributes=True,
        )
        return {row[ID_FIELD]: row for row in response["rows"]}

    def query(
        self, request: Optional[QueryRequest] = None, **kwargs
    ) -> QueryResponseTypedDict:
        request = _get_request(QueryRequest, request, kwargs)
        result = self.transport.request(
            "POST", self._get_path(QUERY_SUFFIX), body=request.to_dict()
        )
        return self._parse_query_response(result)

    def _parse_query_response(self, data: Dict[str, Any]) -> QueryResponseTypedDict:
        """Fill in rows and performance; other fields are passed through."""
        response = QueryResponseTypedDict(**data)
        response["rows"] = data.get("rows") or []
        response["performance"] = data.get("performance")
        return response

    def schema(self) -> SchemaTypedDict:
        return self.transport.request("GET", self._get_path(SCHEMA_SUFFIX, "v1"))

    def metadata(self) -> NamespaceMetadataTypedDict:
        return self.transport.request("GET", self._get_path(METADATA_SUFFIX, "v1"))

    def hint_cache_warm(self) -> HintCacheWarmTypedDict:
        return self.transport.request(
            "GET", self._get_path(HINT_CACHE_WARM_SUFFIX, "v1")
        )
