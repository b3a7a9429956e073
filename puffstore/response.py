from typing import Any, Dict, List, Optional, TypedDict

RowTypedDict = Dict[str, Any]
SchemaTypedDict = Dict[str, Dict[str, Any]]


class QueryPerformanceTypedDict(TypedDict, total=False):
    """Query performance details reported by the service"""

    approx_namespace_size: Optional[int]
    cache_hit_ratio: float
    cache_temperature: str
    server_total_ms: float
    query_execution_ms: float


class QueryResponseTypedDict(TypedDict, total=False):
    """Result of a namespace query"""

    rows: List[RowTypedDict]
    performance: Optional[QueryPerformanceTypedDict]


class WriteResponseTypedDict(TypedDict, total=False):
    """Result of a namespace write"""

    rows_affected: int
    status: str
    message: str


class NamespaceMetadataTypedDict(TypedDict, total=False):
    """Namespace metadata"""

    created_at: Optional[str]
    approx_row_count: int
    approx_logical_bytes: int


class HintCacheWarmTypedDict(TypedDict, total=False):
    """Result of a cache warm hint. Status is "ACCEPTED" or "OK"."""

    status: str
    message: Optional[str]


class NamespaceSummaryTypedDict(TypedDict):
    id: str


class NamespacesResponseTypedDict(TypedDict, total=False):
    """One page of the namespace listing"""

    namespaces: List[NamespaceSummaryTypedDict]
    next_cursor: Optional[str]
