"""
Wire encoding for filter and rank expressions.

The query endpoint takes filters and rank expressions as nested JSON arrays
in prefix-operator form:

    Filters
        ["Eq", ["attr", value]]            (also NotEq, Contains, Lt, Lte, Gt, Gte)
        ["In", ["attr", [v1, v2, ...]]]    (also ContainsAny)
        ["And", [f1, f2, ...]]             (also Or; the list may be empty)
        ["Not", f]

    Rank expressions
        ["attr", "ANN", [x1, x2, ...]]
        ["attr", "BM25", "query text"]
        ["attr", "asc"] / ["attr", "desc"]
        ["Sum", [r1, r2, ...]]             (also Max)
        ["Product", [weight, r]]

``encode`` never fails on a tree that was built through the public
constructors, up to the nesting limit below. ``decode_filter`` and
``decode_rank`` are its inverse and raise ``DecodeError`` subclasses on
malformed input.

Encoding and decoding recurse once per nesting level, so depth is bounded by
the interpreter recursion limit (about 1000 levels by default). Deeper trees
raise ``ValidationError`` from ``encode`` and ``DecodeError`` from the decoders.
"""

import json
from typing import Any, Callable, Tuple, Union

from .errors import ArityMismatchError, DecodeError, UnknownOperatorError, ValidationError
from .filter import (
    BOOLEAN_FILTERS,
    COMPARISON_FILTERS,
    SET_FILTERS,
    Filter,
    Not,
    _Comparison,
    _SetComparison,
)
from .rank_by import (
    COMBINATOR_RANKERS,
    LEAF_RANKERS,
    AttributeOrder,
    Product,
    RankBy,
    SortDirection,
    TextRelevance,
    VectorSearch,
)

JsonValue = Any


def encode(node: Union[Filter, RankBy]) -> JsonValue:
    """
    Encode a filter or rank expression into its wire form.

    Args:
        node: Root of a filter or rank expression tree

    Returns:
        Nested lists ready to be embedded in a JSON request body

    Raises:
        ValidationError: If node is neither a Filter nor a RankBy, or is nested
            beyond the recursion limit
    """
    if isinstance(node, Filter):
        encoder = _encode_filter
    elif isinstance(node, RankBy):
        encoder = _encode_rank
    else:
        raise ValidationError(
            f"Cannot encode {type(node).__name__}. Expected Filter or RankBy."
        )

    try:
        return encoder(node)
    except RecursionError:
        raise ValidationError("Expression is nested too deeply to encode") from None


def dumps(node: Union[Filter, RankBy]) -> str:
    """Encode an expression as compact JSON text. Equal trees give identical text."""
    return json.dumps(encode(node), separators=(",", ":"), allow_nan=False)


def _encode_filter(node: Filter) -> JsonValue:
    if isinstance(node, _Comparison):
        return [node.operator, [node.attribute, node.value]]
    elif isinstance(node, _SetComparison):
        return [node.operator, [node.attribute, list(node.values)]]
    elif isinstance(node, Not):
        return [node.operator, _encode_filter(node.filter)]
    else:
        # And / Or
        return [node.operator, [_encode_filter(child) for child in node.filters]]


def _encode_rank(node: RankBy) -> JsonValue:
    if isinstance(node, VectorSearch):
        return [node.attribute, node.operator, list(node.query_vector)]
    elif isinstance(node, TextRelevance):
        return [node.attribute, node.operator, node.query_text]
    elif isinstance(node, AttributeOrder):
        return [node.attribute, node.direction.value]
    elif isinstance(node, Product):
        return [node.operator, [node.weight, _encode_rank(node.child)]]
    else:
        # Sum / Max
        return [node.operator, [_encode_rank(child) for child in node.children]]


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _build(operator: str, factory: Callable[..., Any], *args: Any) -> Any:
    """Construct a node, reporting construction failures as decode errors."""
    try:
        return factory(*args)
    except ValidationError as e:
        raise DecodeError(f"Invalid {operator} operand: {e.message}") from e


def _split_operator(value: Any) -> Tuple[str, Any]:
    """Split a filter wire value into its operator token and operand."""
    if not _is_array(value) or len(value) != 2:
        raise ArityMismatchError("Filter", "[operator, operand]", value)
    operator, operand = value
    if not isinstance(operator, str):
        raise UnknownOperatorError(operator)
    return operator, operand


def _split_pair(operator: str, operand: Any) -> Tuple[Any, Any]:
    if not _is_array(operand) or len(operand) != 2:
        raise ArityMismatchError(operator, "[attribute, value]", operand)
    return operand[0], operand[1]


def _decode_filter(value: JsonValue) -> Filter:
    operator, operand = _split_operator(value)

    # Attribute comparisons
    if operator in COMPARISON_FILTERS:
        attribute, field_value = _split_pair(operator, operand)
        return _build(operator, COMPARISON_FILTERS[operator], attribute, field_value)

    # Set comparisons
    elif operator in SET_FILTERS:
        attribute, field_values = _split_pair(operator, operand)
        if not _is_array(field_values):
            raise ArityMismatchError(operator, "a list of values", field_values)
        return _build(operator, SET_FILTERS[operator], attribute, field_values)

    # Boolean combinators
    elif operator in BOOLEAN_FILTERS:
        if not _is_array(operand):
            raise ArityMismatchError(operator, "a list of filters", operand)
        children = [_decode_filter(child) for child in operand]
        return BOOLEAN_FILTERS[operator](children)

    elif operator == Not.operator:
        return Not(_decode_filter(operand))

    else:
        raise UnknownOperatorError(operator)


def _decode_rank(value: JsonValue) -> RankBy:
    if not _is_array(value) or len(value) not in (2, 3):
        raise ArityMismatchError(
            "RankBy", "[attribute, token, argument], [attribute, direction] "
            "or [operator, operands]", value
        )

    # Leaf: [attribute, "ANN" | "BM25", argument]
    if len(value) == 3:
        attribute, token, argument = value
        if not isinstance(token, str) or token not in LEAF_RANKERS:
            raise UnknownOperatorError(token)
        return _build(token, LEAF_RANKERS[token], attribute, argument)

    head, operand = value

    # Leaf: [attribute, "asc" | "desc"]
    if isinstance(operand, str):
        if operand not in {d.value for d in SortDirection}:
            raise UnknownOperatorError(operand)
        return _build(operand, AttributeOrder, head, operand)

    if not _is_array(operand):
        raise ArityMismatchError(head, "a list of operands", operand)

    # Combinators: ["Sum" | "Max", [children]] and ["Product", [weight, child]]
    if not isinstance(head, str):
        raise UnknownOperatorError(head)
    elif head in COMBINATOR_RANKERS:
        if not operand:
            raise ArityMismatchError(head, "at least one rank expression", operand)
        children = [_decode_rank(child) for child in operand]
        return COMBINATOR_RANKERS[head](children)
    elif head == Product.operator:
        if len(operand) != 2:
            raise ArityMismatchError(head, "[weight, rank expression]", operand)
        weight, child = operand
        return _build(head, Product, weight, _decode_rank(child))
    else:
        raise UnknownOperatorError(head)


def decode_filter(value: JsonValue) -> Filter:
    """
    Decode a wire value into a filter expression.

    Args:
        value: Nested lists as produced by ``encode`` or parsed from JSON

    Returns:
        The equivalent filter tree

    Raises:
        UnknownOperatorError: If an operator token is not recognized
        ArityMismatchError: If an operator has the wrong operand shape
        DecodeError: If operands are well-formed but invalid, or the value is
            nested beyond the recursion limit
    """
    try:
        return _decode_filter(value)
    except RecursionError:
        raise DecodeError("Filter is nested too deeply to decode") from None


def decode_rank(value: JsonValue) -> RankBy:
    """
    Decode a wire value into a rank expression.

    Args:
        value: Nested lists as produced by ``encode`` or parsed from JSON

    Returns:
        The equivalent rank expression tree

    Raises:
        UnknownOperatorError: If an operator or direction token is not recognized
        ArityMismatchError: If an operator has the wrong operand shape
        DecodeError: If operands are well-formed but invalid, or the value is
            nested beyond the recursion limit
    """
    try:
        return _decode_rank(value)
    except RecursionError:
        raise DecodeError("Rank expression is nested too deeply to decode") from None


def _loads(text: Union[str, bytes]) -> JsonValue:
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"Invalid JSON: {e}") from e


def loads_filter(text: Union[str, bytes]) -> Filter:
    """Parse JSON text and decode it as a filter expression."""
    return decode_filter(_loads(text))


def loads_rank(text: Union[str, bytes]) -> RankBy:
    """Parse JSON text and decode it as a rank expression."""
    return decode_rank(_loads(text))

