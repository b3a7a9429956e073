from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Union

from .filter import Filter
from .metric import DistanceMetric
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


class NamespaceInterface(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        """Name of the namespace."""
        pass

    @abstractmethod
    def write(
        self, request: Optional[WriteRequest] = None, **kwargs
    ) -> WriteResponseTypedDict:
        """
        Apply upserts, patches and deletes to the namespace in one request.

        Either pass a WriteRequest, or its fields as keyword arguments. The
        namespace is created on its first write.

        Args:
            request: Prepared write request (optional)
            **kwargs: WriteRequest fields, used when request is omitted:
                - upsert_rows: rows to insert or replace
                - patch_rows: partial rows to merge into existing rows
                - deletes: ids of rows to delete
                - delete_by_filter: Filter selecting rows to delete
                - distance_metric: DistanceMetric or its string value
                - schema: per-attribute type and index hints

        Returns:
            WriteResponseTypedDict with the number of rows affected

        Raises:
            ValidationError: If the request fields are invalid
            ApiError: If the service rejects the write
        """
        pass

    @abstractmethod
    def upsert(
        self,
        rows: List[RowLike],
        distance_metric: Optional[Union[DistanceMetric, str]] = None,
        schema: Optional[Mapping[str, Any]] = None,
    ) -> int:
        """
        Insert or replace rows.

        If a row already exists with the same id, it is overwritten.

        Args:
            rows: List of rows in supported formats:
                - Row objects
                - Tuples of (id, vector) without attributes
                - Tuples of (id, vector, attributes) with attributes
                - Flat dictionaries with an 'id' key and optionally a 'vector' key
            distance_metric: Metric for vector ranking (optional)
            schema: Per-attribute type and index hints (optional)

        Returns:
            Number of rows affected
        """
        pass

    @abstractmethod
    def upsert_from_dataframe(
        self,
        df,
        distance_metric: Optional[Union[DistanceMetric, str]] = None,
        batch_size: int = 500,
    ) -> int:
        """
        Upserts rows from a pandas DataFrame into the namespace.

        The DataFrame is sent in batches of one write request each. Every
        column becomes an attribute; an 'id' column is required and a
        'vector' column is optional.

        Args:
            df: A pandas DataFrame with an 'id' column
            distance_metric: Metric for vector ranking (optional)
            batch_size: Number of rows to send per request (default: 500)

        Returns:
            Number of rows affected
        """
        pass

    @abstractmethod
    def patch(self, rows: List[RowLike]) -> int:
        """
        Merge attributes into existing rows.

        Attributes not present in a patch row are left untouched.

        Args:
            rows: Partial rows, each carrying an 'id'

        Returns:
            Number of rows affected
        """
        pass

    @abstractmethod
    def delete(
        self,
        ids: Optional[List[RowId]] = None,
        filter: Optional[Filter] = None,
    ) -> int:
        """
        Delete rows by id, by filter, or both in a single write.

        Args:
            ids: Ids of rows to delete
            filter: Delete every row matching this filter

        Returns:
            Number of rows affected

        Raises:
            ValueError: If neither ids nor filter is given
        """
        pass

    @abstractmethod
    def delete_all(self) -> None:
        """Delete the namespace and all of its rows."""
        pass

    @abstractmethod
    def fetch(self, ids: List[RowId]) -> Dict[RowId, RowTypedDict]:
        """
        Fetch rows by their ids.

        Retrieves every attribute of the rows with the given ids.

        Args:
            ids: Ids of rows to retrieve

        Returns:
            Dictionary mapping row ids to rows; missing ids are absent
        """
        pass

    @abstractmethod
    def query(
        self, request: Optional[QueryRequest] = None, **kwargs
    ) -> QueryResponseTypedDict:
        """
        Query the namespace.

        Rows are filtered by an optional Filter and scored by an optional
        RankBy expression combining vector similarity, BM25 relevance and
        attribute order.

        Args:
            request: Prepared query request (optional)
            **kwargs: QueryRequest fields, used when request is omitted:
                - rank_by: RankBy expression
                - filters: Filter expression
                - top_k: maximum number of rows
                - include_attributes: True or a list of attribute names

        Returns:
            QueryResponseTypedDict with the matching rows and performance details

        Raises:
            ValidationError: If the request fields are invalid
            ApiError: If the service rejects the query
        """
        pass

    @abstractmethod
    def schema(self) -> SchemaTypedDict:
        """
        Get the attribute schema of the namespace.

        Returns:
            Dictionary mapping attribute names to their type and index settings
        """
        pass

    @abstractmethod
    def metadata(self) -> NamespaceMetadataTypedDict:
        """
        Get namespace metadata such as its creation time and approximate size.
        """
        pass

    @abstractmethod
    def hint_cache_warm(self) -> HintCacheWarmTypedDict:
        """
        Ask the service to warm its cache for this namespace ahead of queries.

        Returns:
            HintCacheWarmTypedDict whose status is "ACCEPTED" or "OK"
        """
        pass
