"""
Filter module for puffstore.

This module provides the filter expression tree used to restrict query
results and delete-by-filter writes. Filters are immutable values built
bottom-up with the smart constructors on ``Filter``::

    Filter.and_(
        Filter.or_(Filter.in_("numbers", [2, 4])),
        Filter.not_eq("foo", None),
    )

Trees are validated when they are built; the wire encoding lives in
``puffstore.encoding``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

from .errors import ValidationError

# Type definitions for filter values
FieldValue = Union[str, int, float, bool, None]
FieldValues = Tuple[FieldValue, ...]


def _check_attribute(attribute: Any) -> str:
    """Validate an attribute name."""
    if not isinstance(attribute, str) or not attribute:
        raise ValidationError(
            f"Attribute name must be a non-empty string, got {attribute!r}"
        )
    return attribute


def _check_value(operator: str, value: Any) -> FieldValue:
    """
    Validate a single comparison value.

    Args:
        operator: Operator token, used in error messages
        value: The value to compare against

    Returns:
        The value unchanged

    Raises:
        ValidationError: If the value is not a JSON scalar
    """
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"{operator} value must be finite, got {value!r}")
        return value
    raise ValidationError(
        f"Unsupported {operator} value type: {type(value).__name__}"
    )


def _check_values(operator: str, values: Any) -> FieldValues:
    """Validate a set-membership operand and freeze it into a tuple."""
    if isinstance(values, (str, bytes, dict)) or not isinstance(values, Iterable):
        raise ValidationError(f"{operator} values must be a list of values")
    return tuple(_check_value(operator, value) for value in values)


def _check_filters(operator: str, filters: Any) -> Tuple["Filter", ...]:
    """Validate the operands of a boolean combinator and freeze them into a tuple."""
    if isinstance(filters, Filter) or not isinstance(filters, Iterable):
        raise ValidationError(f"{operator} operands must be a list of filters")
    filters = tuple(filters)
    for child in filters:
        if not isinstance(child, Filter):
            raise ValidationError(
                f"{operator} operands must be filters, got {type(child).__name__}"
            )
    return filters


def _flatten_operands(filters: Tuple[Any, ...]) -> Tuple[Any, ...]:
    # and_([a, b]) and and_(a, b) are the same call
    if len(filters) == 1 and not isinstance(filters[0], Filter):
        return filters[0]
    return filters


def _splice(node: "Filter", kind: type) -> Tuple["Filter", ...]:
    # Empty combinators are kept as operands, never merged away
    if isinstance(node, kind) and node.filters:
        return node.filters
    return (node,)


class Filter:
    """
    Base class of the filter expression tree.

    Every subclass is a frozen dataclass, so trees compare structurally and
    can be shared across threads. Supports ``&``, ``|`` and ``~`` as
    shorthands for ``and_``, ``or_`` and ``not_``.
    """

    __slots__ = ()

    # Comparison constructors

    @staticmethod
    def eq(attribute: str, value: FieldValue) -> "Eq":
        """Attribute equals value. ``None`` matches an explicit null."""
        return Eq(attribute, value)

    @staticmethod
    def not_eq(attribute: str, value: FieldValue) -> "NotEq":
        return NotEq(attribute, value)

    @staticmethod
    def in_(attribute: str, values: Iterable[FieldValue]) -> "In":
        """Attribute equals any of the given values."""
        return In(attribute, values)

    @staticmethod
    def contains(attribute: str, value: FieldValue) -> "Contains":
        """Array attribute contains the value."""
        return Contains(attribute, value)

    @staticmethod
    def contains_any(attribute: str, values: Iterable[FieldValue]) -> "ContainsAny":
        """Array attribute contains at least one of the values."""
        return ContainsAny(attribute, values)

    @staticmethod
    def lt(attribute: str, value: FieldValue) -> "Lt":
        return Lt(attribute, value)

    @staticmethod
    def lte(attribute: str, value: FieldValue) -> "Lte":
        return Lte(attribute, value)

    @staticmethod
    def gt(attribute: str, value: FieldValue) -> "Gt":
        return Gt(attribute, value)

    @staticmethod
    def gte(attribute: str, value: FieldValue) -> "Gte":
        return Gte(attribute, value)

    # Boolean constructors

    @staticmethod
    def and_(*filters: Union["Filter", Iterable["Filter"]]) -> "And":
        """
        Conjunction of zero or more filters.

        Accepts either varargs or a single iterable of filters. An empty
        conjunction is legal and is sent to the service as-is.
        """
        return And(_flatten_operands(filters))

    @staticmethod
    def or_(*filters: Union["Filter", Iterable["Filter"]]) -> "Or":
        """Disjunction of zero or more filters. See ``and_``."""
        return Or(_flatten_operands(filters))

    @staticmethod
    def not_(*filters: "Filter") -> "Not":
        """
        Negation of exactly one filter.

        Raises:
            ValidationError: If called with zero or more than one filter
        """
        if len(filters) != 1:
            raise ValidationError(
                f"Not takes exactly one filter, got {len(filters)}"
            )
        return Not(filters[0])

    def __and__(self, other: "Filter") -> "And":
        if not isinstance(other, Filter):
            return NotImplemented
        return And(_splice(self, And) + _splice(other, And))

    def __or__(self, other: "Filter") -> "Or":
        if not isinstance(other, Filter):
            return NotImplemented
        return Or(_splice(self, Or) + _splice(other, Or))

    def __invert__(self) -> "Not":
        return Not(self)


@dataclass(frozen=True)
class _Comparison(Filter):
    """Attribute compared against a single scalar value."""

    attribute: str
    value: FieldValue

    operator = ""

    def __post_init__(self) -> None:
        _check_attribute(self.attribute)
        _check_value(self.operator, self.value)


@dataclass(frozen=True)
class _SetComparison(Filter):
    """Attribute compared against an ordered set of scalar values."""

    attribute: str
    values: FieldValues

    operator = ""

    def __post_init__(self) -> None:
        _check_attribute(self.attribute)
        object.__setattr__(self, "values", _check_values(self.operator, self.values))


@dataclass(frozen=True)
class Eq(_Comparison):
    operator = "Eq"


@dataclass(frozen=True)
class NotEq(_Comparison):
    operator = "NotEq"


@dataclass(frozen=True)
class Contains(_Comparison):
    operator = "Contains"


@dataclass(frozen=True)
class Lt(_Comparison):
    operator = "Lt"


@dataclass(frozen=True)
class Lte(_Comparison):
    operator = "Lte"


@dataclass(frozen=True)
class Gt(_Comparison):
    operator = "Gt"


@dataclass(frozen=True)
class Gte(_Comparison):
    operator = "Gte"


@dataclass(frozen=True)
class In(_SetComparison):
    operator = "In"


@dataclass(frozen=True)
class ContainsAny(_SetComparison):
    operator = "ContainsAny"


@dataclass(frozen=True)
class And(Filter):
    """All operands must match. Operand order is preserved."""

    filters: Tuple[Filter, ...] = ()

    operator = "And"

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", _check_filters(self.operator, self.filters))


@dataclass(frozen=True)
class Or(Filter):
    """At least one operand must match. Operand order is preserved."""

    filters: Tuple[Filter, ...] = ()

    operator = "Or"

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", _check_filters(self.operator, self.filters))


@dataclass(frozen=True)
class Not(Filter):
    """
    Negation of a single filter.

    Nested negations are kept as written: the service treats nulls
    differently under ``Not(Not(f))`` than under ``f``.
    """

    filter: Filter

    operator = "Not"

    def __post_init__(self) -> None:
        if not isinstance(self.filter, Filter):
            raise ValidationError(
                f"Not operand must be a filter, got {type(self.filter).__name__}"
            )


# Operator token to node class, for every comparison variant
COMPARISON_FILTERS = {
    cls.operator: cls for cls in (Eq, NotEq, Contains, Lt, Lte, Gt, Gte)
}
SET_FILTERS = {cls.operator: cls for cls in (In, ContainsAny)}
BOOLEAN_FILTERS = {cls.operator: cls for cls in (And, Or)}
