"""
puffstore: A client library for a hosted vector search service.

This module provides classes and utilities for writing rows to namespaces
and querying them with composable filter and rank expressions.
"""

from importlib import metadata

# Wire encoding
from .encoding import decode_filter, decode_rank, dumps, encode, loads_filter, loads_rank

# Errors
from .errors import (
    ApiError,
    ArityMismatchError,
    DecodeError,
    PuffstoreError,
    TransportError,
    UnknownOperatorError,
    ValidationError,
)

# Filter types
from .filter import (
    And,
    Contains,
    ContainsAny,
    Eq,
    FieldValue,
    Filter,
    Gt,
    Gte,
    In,
    Lt,
    Lte,
    Not,
    NotEq,
    Or,
)

# Rank expressions
from .rank_by import (
    AttributeOrder,
    Max,
    Product,
    RankBy,
    SortDirection,
    Sum,
    TextRelevance,
    VectorSearch,
)

# Configuration
from .config import ClientConfig

# Similarity metrics
from .metric import DistanceMetric
from .namespace_interface import NamespaceInterface
from .namespace_list import NamespaceList
from .namespace_model import NamespaceModel

# Requests and results
from .request import QueryRequest, WriteRequest
from .response import (
    HintCacheWarmTypedDict,
    NamespaceMetadataTypedDict,
    QueryPerformanceTypedDict,
    QueryResponseTypedDict,
    WriteResponseTypedDict,
)

# Row representations
from .row import Row, RowAttributesTypedDict, RowAttributeValue, RowTuple, RowTupleWithAttributes

# Core components
from .vectordb import VectorDB

# Version handling
try:
    __version__ = metadata.version(__package__)
except metadata.PackageNotFoundError:
    __version__ = ""
del metadata  # Avoid polluting the namespace

# Define public API
__all__ = [
    # Core components
    "VectorDB",
    "ClientConfig",
    "NamespaceInterface",
    "NamespaceModel",
    "NamespaceList",
    # Row representations
    "Row",
    "RowTuple",
    "RowTupleWithAttributes",
    "RowAttributesTypedDict",
    "RowAttributeValue",
    # Similarity metrics
    "DistanceMetric",
    # Filter types
    "Filter",
    "FieldValue",
    "Eq",
    "NotEq",
    "In",
    "Contains",
    "ContainsAny",
    "Lt",
    "Lte",
    "Gt",
    "Gte",
    "And",
    "Or",
    "Not",
    # Rank expressions
    "RankBy",
    "SortDirection",
    "VectorSearch",
    "TextRelevance",
    "AttributeOrder",
    "Sum",
    "Product",
    "Max",
    # Wire encoding
    "encode",
    "dumps",
    "decode_filter",
    "decode_rank",
    "loads_filter",
    "loads_rank",
    # Requests and results
    "WriteRequest",
    "QueryRequest",
    "QueryResponseTypedDict",
    "QueryPerformanceTypedDict",
    "WriteResponseTypedDict",
    "NamespaceMetadataTypedDict",
    "HintCacheWarmTypedDict",
    # Errors
    "PuffstoreError",
    "ValidationError",
    "DecodeError",
    "UnknownOperatorError",
    "ArityMismatchError",
    "ApiError",
    "TransportError",
    # Version
    "__version__",
]
