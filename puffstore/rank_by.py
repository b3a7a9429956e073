"""
Rank expressions for puffstore queries.

A rank expression tells the service how to score and order rows. Leaves are
vector similarity (ANN), BM25 text relevance and plain attribute order;
combinators blend them::

    RankBy.sum([
        RankBy.product(2.0, RankBy.bm25("title", "walrus")),
        RankBy.bm25("content", "walrus"),
    ])

Like filters, rank expressions are frozen dataclasses validated on
construction and encoded by ``puffstore.encoding``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Iterable, Tuple, Union

from .errors import ValidationError
from .filter import _check_attribute


class SortDirection(str, Enum):
    """Direction of an attribute order. Values are the wire tokens."""

    ASC = "asc"
    DESC = "desc"


def _check_vector(vector: Any) -> Tuple[float, ...]:
    """Validate a query vector and freeze it into a tuple of floats."""
    if isinstance(vector, (str, bytes)) or not isinstance(vector, Iterable):
        raise ValidationError("Query vector must be a list of numbers")
    values = []
    for component in vector:
        if isinstance(component, bool) or not isinstance(component, Real):
            raise ValidationError(
                f"Query vector components must be numbers, got {type(component).__name__}"
            )
        component = float(component)
        if not math.isfinite(component):
            raise ValidationError("Query vector components must be finite")
        values.append(component)
    if not values:
        raise ValidationError("Query vector must not be empty")
    return tuple(values)


def _check_weight(weight: Any) -> float:
    if isinstance(weight, bool) or not isinstance(weight, Real):
        raise ValidationError(
            f"Product weight must be a number, got {type(weight).__name__}"
        )
    weight = float(weight)
    if not math.isfinite(weight):
        raise ValidationError(f"Product weight must be finite, got {weight!r}")
    return weight


def _check_children(operator: str, children: Any) -> Tuple["RankBy", ...]:
    """Validate combinator operands: one or more rank expressions."""
    if isinstance(children, RankBy) or not isinstance(children, Iterable):
        raise ValidationError(f"{operator} operands must be a list of rank expressions")
    children = tuple(children)
    if not children:
        raise ValidationError(f"{operator} requires at least one rank expression")
    for child in children:
        if not isinstance(child, RankBy):
            raise ValidationError(
                f"{operator} operands must be rank expressions, got {type(child).__name__}"
            )
    return children


def _flatten_operands(children: Tuple[Any, ...]) -> Any:
    # sum([a, b]) and sum(a, b) are the same call
    if len(children) == 1 and not isinstance(children[0], RankBy):
        return children[0]
    return children


class RankBy:
    """Base class of the rank expression tree, with its smart constructors."""

    __slots__ = ()

    @staticmethod
    def vector(attribute: str, query_vector: Iterable[float]) -> "VectorSearch":
        """Approximate nearest neighbour search on a vector attribute."""
        return VectorSearch(attribute, query_vector)

    @staticmethod
    def bm25(attribute: str, query_text: str) -> "TextRelevance":
        """BM25 relevance of a full-text-indexed attribute to the query text."""
        return TextRelevance(attribute, query_text)

    @staticmethod
    def asc(attribute: str) -> "AttributeOrder":
        return AttributeOrder(attribute, SortDirection.ASC)

    @staticmethod
    def desc(attribute: str) -> "AttributeOrder":
        return AttributeOrder(attribute, SortDirection.DESC)

    @staticmethod
    def order_by(
        attribute: str, direction: Union[SortDirection, str]
    ) -> "AttributeOrder":
        return AttributeOrder(attribute, direction)

    @staticmethod
    def sum(*children: Union["RankBy", Iterable["RankBy"]]) -> "Sum":
        """Sum of one or more rank expressions."""
        return Sum(_flatten_operands(children))

    @staticmethod
    def max(*children: Union["RankBy", Iterable["RankBy"]]) -> "Max":
        """Maximum of one or more rank expressions."""
        return Max(_flatten_operands(children))

    @staticmethod
    def product(weight: float, child: "RankBy") -> "Product":
        """
        Scale a rank expression by a constant weight.

        Args:
            weight: Finite multiplier; integers are stored as floats
            child: The rank expression to scale

        Raises:
            ValidationError: If the weight is NaN, infinite or not a number
        """
        return Product(weight, child)


@dataclass(frozen=True)
class VectorSearch(RankBy):
    attribute: str
    query_vector: Tuple[float, ...]

    operator = "ANN"

    def __post_init__(self) -> None:
        _check_attribute(self.attribute)
        object.__setattr__(self, "query_vector", _check_vector(self.query_vector))


@dataclass(frozen=True)
class TextRelevance(RankBy):
    attribute: str
    query_text: str

    operator = "BM25"

    def __post_init__(self) -> None:
        _check_attribute(self.attribute)
        if not isinstance(self.query_text, str):
            raise ValidationError(
                f"BM25 query text must be a string, got {type(self.query_text).__name__}"
            )


@dataclass(frozen=True)
class AttributeOrder(RankBy):
    attribute: str
    direction: SortDirection

    def __post_init__(self) -> None:
        _check_attribute(self.attribute)
        try:
            direction = SortDirection(self.direction)
        except ValueError:
            raise ValidationError(
                f"Invalid sort direction: {self.direction!r}. "
                f"Must be one of {[d.value for d in SortDirection]}"
            ) from None
        object.__setattr__(self, "direction", direction)


@dataclass(frozen=True)
class Sum(RankBy):
    children: Tuple[RankBy, ...]

    operator = "Sum"

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "children", _check_children(self.operator, self.children)
        )


@dataclass(frozen=True)
class Max(RankBy):
    children: Tuple[RankBy, ...]

    operator = "Max"

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "children", _check_children(self.operator, self.children)
        )


@dataclass(frozen=True)
class Product(RankBy):
    weight: float
    child: RankBy

    operator = "Product"

    def __post_init__(self) -> None:
        object.__setattr__(self, "weight", _check_weight(self.weight))
        if not isinstance(self.child, RankBy):
            raise ValidationError(
                f"Product operand must be a rank expression, got {type(self.child).__name__}"
            )


# Operator token to node class
LEAF_RANKERS = {cls.operator: cls for cls in (VectorSearch, TextRelevance)}
COMBINATOR_RANKERS = {cls.operator: cls for cls in (Sum, Max)}
