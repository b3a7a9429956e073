"""
Request payloads for the write and query endpoints.

WriteRequest and QueryRequest are plain data containers: they validate their
fields when constructed and know how to serialize themselves into the JSON
body the service expects. Filters and rank expressions are serialized with
``puffstore.encoding``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

from ._constants import (
    DELETE_BY_FILTER_FIELD,
    DELETES_FIELD,
    DISTANCE_METRIC_FIELD,
    FILTERS_FIELD,
    INCLUDE_ATTRIBUTES_FIELD,
    PATCH_ROWS_FIELD,
    RANK_BY_FIELD,
    SCHEMA_FIELD,
    TOP_K_FIELD,
    UPSERT_ROWS_FIELD,
)
from .encoding import encode
from .errors import ValidationError
from .filter import Filter
from .metric import DistanceMetric
from .rank_by import RankBy
from .row import Row, RowId, RowLike, _check_row_id, _extract_row_data

IncludeAttributes = Union[bool, Sequence[str]]


def _get_distance_metric(
    metric: Optional[Union[DistanceMetric, str]],
) -> Optional[DistanceMetric]:
    """Convert a metric string to its enum, validating it."""
    if metric is None or isinstance(metric, DistanceMetric):
        return metric
    try:
        return DistanceMetric(metric)
    except ValueError:
        raise ValidationError(
            f"Invalid distance_metric: {metric}. "
            f"Must be one of {[m.value for m in DistanceMetric]}"
        ) from None


def _format_rows(field: str, rows: Any) -> Optional[Tuple[Dict[str, Any], ...]]:
    if rows is None:
        return None
    if isinstance(rows, (str, bytes, dict, Row)) or not isinstance(rows, Iterable):
        raise ValidationError(f"{field} must be a list of rows")
    return tuple(_extract_row_data(row) for row in rows)


@dataclass(frozen=True)
class WriteRequest:
    """
    Body of a namespace write.

    Any combination of upserts, patches, id deletes and a delete-by-filter may
    be sent in one request; the service applies them together. Rows are
    validated and flattened on construction.

    Attributes:
        upsert_rows: Rows to insert or replace, in any format accepted by Row
        patch_rows: Partial rows; each must carry an id, other attributes are merged
        deletes: Ids of rows to delete
        delete_by_filter: Delete every row matching this filter
        distance_metric: Metric used for vector ranking in this namespace
        schema: Per-attribute type and index hints, e.g.
            {"title": {"type": "string", "full_text_search": True}}
    """

    upsert_rows: Optional[Sequence[RowLike]] = None
    patch_rows: Optional[Sequence[RowLike]] = None
    deletes: Optional[Sequence[RowId]] = None
    delete_by_filter: Optional[Filter] = None
    distance_metric: Optional[Union[DistanceMetric, str]] = None
    schema: Optional[Mapping[str, Any]] = None

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "upsert_rows", _format_rows(UPSERT_ROWS_FIELD, self.upsert_rows)
        )
        object.__setattr__(
            self, "patch_rows", _format_rows(PATCH_ROWS_FIELD, self.patch_rows)
        )

        if self.deletes is not None:
            if isinstance(self.deletes, (str, bytes, int)):
                raise ValidationError("deletes must be a list of row ids")
            object.__setattr__(
                self, "deletes", tuple(_check_row_id(row_id) for row_id in self.deletes)
            )

        if self.delete_by_filter is not None and not isinstance(
            self.delete_by_filter, Filter
        ):
            raise ValidationError(
                f"delete_by_filter must be a Filter, got {type(self.delete_by_filter).__name__}"
            )

        object.__setattr__(
            self, "distance_metric", _get_distance_metric(self.distance_metric)
        )

        if self.schema is not None:
            if not isinstance(self.schema, Mapping):
                raise ValidationError("schema must be a mapping of attribute name to hints")
            for name in self.schema:
                if not isinstance(name, str) or not name:
                    raise ValidationError(
                        f"schema attribute names must be non-empty strings, got {name!r}"
                    )
            object.__setattr__(self, "schema", dict(self.schema))

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the request into the JSON body of the write endpoint.

        Returns:
            Dictionary containing only the fields that were set
        """
        body: Dict[str, Any] = {}
        if self.upsert_rows is not None:
            body[UPSERT_ROWS_FIELD] = [dict(row) for row in self.upsert_rows]
        if self.patch_rows is not None:
            body[PATCH_ROWS_FIELD] = [dict(row) for row in self.patch_rows]
        if self.deletes is not None:
            body[DELETES_FIELD] = list(self.deletes)
        if self.delete_by_filter is not None:
            body[DELETE_BY_FILTER_FIELD] = encode(self.delete_by_filter)
        if self.distance_metric is not None:
            body[DISTANCE_METRIC_FIELD] = self.distance_metric.value
        if self.schema is not None:
            body[SCHEMA_FIELD] = dict(self.schema)
        return body


@dataclass(frozen=True)
class QueryRequest:
    """
    Body of a namespace query.

    Attributes:
        rank_by: How to score and order rows
        filters: Only rows matching this filter are returned
        top_k: Maximum number of rows to return
        include_attributes: True for every attribute, False for none beyond
            the id, or an ordered list of attribute names
    """

    rank_by: Optional[RankBy] = None
    filters: Optional[Filter] = None
    top_k: Optional[int] = None
    include_attributes: Optional[IncludeAttributes] = None

    def __post_init__(self) -> None:
        if self.rank_by is not None and not isinstance(self.rank_by, RankBy):
            raise ValidationError(
                f"rank_by must be a RankBy expression, got {type(self.rank_by).__name__}"
            )
        if self.filters is not None and not isinstance(self.filters, Filter):
            raise ValidationError(
                f"filters must be a Filter, got {type(self.filters).__name__}"
            )

        if self.top_k is not None:
            if isinstance(self.top_k, bool) or not isinstance(self.top_k, int):
                raise ValidationError(f"top_k must be an integer, got {self.top_k!r}")
            if self.top_k < 1:
                raise ValidationError(f"top_k must be positive, got {self.top_k}")

        include = self.include_attributes
        if include is not None and not isinstance(include, bool):
            if isinstance(include, (str, bytes)) or not isinstance(include, Sequence):
                raise ValidationError(
                    "include_attributes must be a boolean or a list of attribute names"
                )
            for name in include:
                if not isinstance(name, str):
                    raise ValidationError(
                        f"include_attributes entries must be strings, got {name!r}"
                    )
            object.__setattr__(self, "include_attributes", tuple(include))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the request into the JSON body of the query endpoint."""
        body: Dict[str, Any] = {}
        if self.rank_by is not None:
            body[RANK_BY_FIELD] = encode(self.rank_by)
        if self.filters is not None:
            body[FILTERS_FIELD] = encode(self.filters)
        if self.top_k is not None:
            body[TOP_K_FIELD] = self.top_k
        if self.include_attributes is not None:
            if isinstance(self.include_attributes, bool):
                body[INCLUDE_ATTRIBUTES_FIELD] = self.include_attributes
            else:
                body[INCLUDE_ATTRIBUTES_FIELD] = list(self.include_attributes)
        return body
