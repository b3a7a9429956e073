"""
Unit tests for rank expression constructors.
"""

import math

import pytest

from puffstore.errors import ValidationError
from puffstore.rank_by import (
    AttributeOrder,
    Max,
    Product,
    RankBy,
    SortDirection,
    Sum,
    TextRelevance,
    VectorSearch,
)


def test_vector_search():
    node = RankBy.vector("vector", [1, 2.5, 3])
    assert isinstance(node, VectorSearch)
    assert node.attribute == "vector"
    assert node.query_vector == (1.0, 2.5, 3.0)
    assert node.operator == "ANN"


def test_vector_search_validation():
    with pytest.raises(ValidationError, match="must not be empty"):
        RankBy.vector("vector", [])
    with pytest.raises(ValidationError, match="must be finite"):
        RankBy.vector("vector", [0.1, math.nan])
    with pytest.raises(ValidationError, match="components must be numbers"):
        RankBy.vector("vector", [0.1, "0.2"])
    with pytest.raises(ValidationError, match="components must be numbers"):
        RankBy.vector("vector", [True, False])
    with pytest.raises(ValidationError, match="must be a list of numbers"):
        RankBy.vector("vector", "0.1,0.2")


def test_bm25():
    node = RankBy.bm25("text", "large tusk")
    assert node == TextRelevance("text", "large tusk")
    assert node.operator == "BM25"

    # Empty query text is passed through to the service
    assert RankBy.bm25("text", "").query_text == ""

    with pytest.raises(ValidationError, match="BM25 query text must be a string"):
        RankBy.bm25("text", 42)


def test_attribute_order():
    assert RankBy.asc("id") == AttributeOrder("id", SortDirection.ASC)
    assert RankBy.desc("id") == AttributeOrder("id", SortDirection.DESC)
    assert RankBy.order_by("id", "desc").direction is SortDirection.DESC


def test_attribute_order_invalid_direction():
    with pytest.raises(ValidationError, match="Invalid sort direction"):
        RankBy.order_by("id", "sideways")


def test_invalid_attribute_name():
    with pytest.raises(ValidationError, match="Attribute name must be a non-empty string"):
        RankBy.bm25("", "text")
    with pytest.raises(ValidationError, match="Attribute name must be a non-empty string"):
        RankBy.asc(None)


def test_sum_and_max():
    a = RankBy.bm25("title", "walrus")
    b = RankBy.bm25("content", "walrus")

    assert RankBy.sum([a, b]) == RankBy.sum(a, b) == Sum((a, b))
    assert RankBy.max([a, b]) == Max((a, b))
    assert RankBy.sum(a).children == (a,)


def test_empty_sum_and_max_are_rejected():
    with pytest.raises(ValidationError, match="Sum requires at least one rank expression"):
        RankBy.sum([])
    with pytest.raises(ValidationError, match="Max requires at least one rank expression"):
        RankBy.max()


def test_combinator_rejects_non_rank_operands():
    with pytest.raises(ValidationError, match="Sum operands must be rank expressions"):
        RankBy.sum([RankBy.asc("id"), "desc"])
    with pytest.raises(ValidationError, match="Max operands must be a list of rank expressions"):
        RankBy.max(3)


def test_product():
    child = RankBy.bm25("title", "one")
    node = RankBy.product(2.0, child)
    assert node == Product(2.0, child)
    assert node.weight == 2.0

    # Integer weights are stored as floats
    assert RankBy.product(3, child).weight == 3.0
    assert isinstance(RankBy.product(3, child).weight, float)

    # Zero and negative weights are legal
    assert RankBy.product(0, child).weight == 0.0
    assert RankBy.product(-1.5, child).weight == -1.5


def test_product_rejects_non_finite_weight():
    child = RankBy.bm25("title", "one")
    with pytest.raises(ValidationError, match="Product weight must be finite"):
        RankBy.product(math.nan, child)
    with pytest.raises(ValidationError, match="Product weight must be finite"):
        RankBy.product(math.inf, child)
    with pytest.raises(ValidationError, match="Product weight must be finite"):
        RankBy.product(-math.inf, child)


def test_product_rejects_invalid_operands():
    child = RankBy.bm25("title", "one")
    with pytest.raises(ValidationError, match="Product weight must be a number"):
        RankBy.product("2", child)
    with pytest.raises(ValidationError, match="Product weight must be a number"):
        RankBy.product(True, child)
    with pytest.raises(ValidationError, match="Product operand must be a rank expression"):
        RankBy.product(2.0, [child])


def test_nested_expression():
    node = RankBy.product(
        2.0,
        RankBy.max([RankBy.product(2.0, RankBy.bm25("title", "one")), RankBy.bm25("content", "foo")]),
    )
    assert isinstance(node.child, Max)
    assert isinstance(node.child.children[0], Product)
    assert node.child.children[1] == RankBy.bm25("content", "foo")
