"""
Unit tests for namespace operations against a mocked HTTP service.
"""

import json

import httpx
import pandas as pd
import pytest

from puffstore import VectorDB
from puffstore.errors import ApiError, TransportError, ValidationError
from puffstore.filter import Filter
from puffstore.rank_by import RankBy
from puffstore.request import QueryRequest, WriteRequest
from puffstore.row import Row


class RecordingHandler:
    """Answers every request with a canned response and records what was sent."""

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = {} if payload is None else payload
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_body(self):
        return json.loads(self.requests[-1].content)


def make_namespace(handler, name="walrus"):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    db = VectorDB(api_key="test-key", base_url="https://example.test", http_client=client)
    return db.Namespace(name)


@pytest.fixture
def handler():
    return RecordingHandler(payload={"rows_affected": 2, "status": "OK"})


@pytest.fixture
def namespace(handler):
    return make_namespace(handler)


def test_namespace_name(namespace):
    assert namespace.name == "walrus"
    assert repr(namespace) == "Namespace(name='walrus')"


def test_invalid_namespace_name(handler):
    with pytest.raises(ValidationError, match="Namespace name must be a non-empty string"):
        make_namespace(handler, name="")


def test_upsert(namespace, handler):
    count = namespace.upsert(
        [Row(id=1, vector=[0.1, 0.2], attributes={"kind": "seal"}), (2, [0.3, 0.4])],
        distance_metric="euclidean_squared",
    )

    assert count == 2
    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url == "https://example.test/v2/namespaces/walrus"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert request.headers["Content-Type"] == "application/json"
    assert handler.last_body == {
        "upsert_rows": [
            {"id": 1, "vector": [0.1, 0.2], "kind": "seal"},
            {"id": 2, "vector": [0.3, 0.4]},
        ],
        "distance_metric": "euclidean_squared",
    }


def test_upsert_empty_rows_sends_nothing(namespace, handler):
    assert namespace.upsert([]) == 0
    assert handler.requests == []


def test_patch(namespace, handler):
    assert namespace.patch([{"id": 1, "kind": "walrus"}]) == 2
    assert handler.last_body == {"patch_rows": [{"id": 1, "kind": "walrus"}]}


def test_delete_by_ids_and_filter(namespace, handler):
    namespace.delete(ids=[1, 2], filter=Filter.eq("kind", "seal"))
    assert handler.last_body == {
        "deletes": [1, 2],
        "delete_by_filter": ["Eq", ["kind", "seal"]],
    }


def test_delete_requires_ids_or_filter(namespace, handler):
    with pytest.raises(ValueError, match="Must specify ids or filter"):
        namespace.delete()
    with pytest.raises(ValueError, match="Must specify ids or filter"):
        namespace.delete(ids=[])
    assert handler.requests == []


def test_write_with_request_object(namespace, handler):
    result = namespace.write(WriteRequest(deletes=["a"]))
    assert result == {"rows_affected": 2, "status": "OK"}
    assert handler.last_body == {"deletes": ["a"]}


def test_write_rejects_request_and_kwargs(namespace):
    with pytest.raises(ValueError, match="Cannot pass both a WriteRequest and keyword arguments"):
        namespace.write(WriteRequest(deletes=[1]), deletes=[2])


def test_write_rejects_wrong_request_type(namespace):
    with pytest.raises(ValidationError, match="Expected WriteRequest, got QueryRequest"):
        namespace.write(QueryRequest(top_k=1))


def test_delete_all(namespace, handler):
    namespace.delete_all()
    request = handler.requests[0]
    assert request.method == "DELETE"
    assert request.url.path == "/v2/namespaces/walrus"


def test_query():
    handler = RecordingHandler(
        payload={
            "rows": [{"id": 1, "$dist": 0.5, "kind": "seal"}],
            "performance": {"server_total_ms": 3.2, "cache_temperature": "hot"},
        }
    )
    namespace = make_namespace(handler)

    response = namespace.query(
        rank_by=RankBy.sum([RankBy.bm25("text", "large tusk"), RankBy.bm25("text", "mollusk diet")]),
        filters=Filter.not_eq("kind", None),
        top_k=5,
        include_attributes=["kind"],
    )

    assert response["rows"] == [{"id": 1, "$dist": 0.5, "kind": "seal"}]
    assert response["performance"]["server_total_ms"] == 3.2
    assert handler.requests[0].url.path == "/v2/namespaces/walrus/query"
    assert handler.last_body == {
        "rank_by": [
            "Sum",
            [["text", "BM25", "large tusk"], ["text", "BM25", "mollusk diet"]],
        ],
        "filters": ["NotEq", ["kind", None]],
        "top_k": 5,
        "include_attributes": ["kind"],
    }


def test_query_empty_namespace():
    namespace = make_namespace(RecordingHandler(payload={}))
    response = namespace.query(QueryRequest(rank_by=RankBy.asc("id"), top_k=10))
    assert response["rows"] == []
    assert response["performance"] is None


def test_fetch():
    handler = RecordingHandler(
        payload={"rows": [{"id": 1, "kind": "seal"}, {"id": "b", "kind": "walrus"}]}
    )
    namespace = make_namespace(handler)

    rows = namespace.fetch([1, "b", 3])

    assert rows == {1: {"id": 1, "kind": "seal"}, "b": {"id": "b", "kind": "walrus"}}
    assert handler.last_body == {
        "filters": ["In", ["id", [1, "b", 3]]],
        "top_k": 3,
        "include_attributes": True,
    }


def test_fetch_no_ids(namespace, handler):
    assert namespace.fetch([]) == {}
    assert handler.requests == []


def test_metadata_endpoints():
    handler = RecordingHandler(payload={"status": "ACCEPTED"})
    namespace = make_namespace(handler)

    assert namespace.hint_cache_warm() == {"status": "ACCEPTED"}
    namespace.schema()
    namespace.metadata()

    assert [(r.method, r.url.path) for r in handler.requests] == [
        ("GET", "/v1/namespaces/walrus/hint_cache_warm"),
        ("GET", "/v1/namespaces/walrus/schema"),
        ("GET", "/v1/namespaces/walrus/metadata"),
    ]
    assert all(not r.content for r in handler.requests)


def test_api_error():
    handler = RecordingHandler(status_code=400, payload={"error": "invalid filter"})
    namespace = make_namespace(handler)

    with pytest.raises(ApiError, match="API error 400") as exc:
        namespace.query(top_k=1)
    assert exc.value.status_code == 400
    assert "invalid filter" in exc.value.message


def test_empty_success_body():
    def handler(request):
        return httpx.Response(202)

    namespace = make_namespace(handler)
    assert namespace.write(deletes=[1]) == {}


def test_invalid_json_response():
    def handler(request):
        return httpx.Response(200, content=b"<html>")

    namespace = make_namespace(handler)
    with pytest.raises(ApiError, match="Invalid JSON in response"):
        namespace.metadata()


def test_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    namespace = make_namespace(handler)
    with pytest.raises(TransportError, match="Request to https://example.test/v1/namespaces/walrus/schema failed") as exc:
        namespace.schema()
    assert isinstance(exc.value.original_error, httpx.ConnectError)


def test_upsert_from_dataframe(namespace, handler):
    df = pd.DataFrame(
        {
            "id": [1, 2, 3],
            "vector": [[0.1, 0.2], [0.3, 0.4], [0.5, 0.6]],
            "kind": ["seal", None, "walrus"],
            "weight": [1.5, float("nan"), 3.0],
        }
    )

    assert namespace.upsert_from_dataframe(df, batch_size=2) == 4

    assert len(handler.requests) == 2
    first = json.loads(handler.requests[0].content)
    second = json.loads(handler.requests[1].content)
    assert first == {
        "upsert_rows": [
            {"id": 1, "vector": [0.1, 0.2], "kind": "seal", "weight": 1.5},
            {"id": 2, "vector": [0.3, 0.4], "kind": None, "weight": None},
        ]
    }
    assert second == {
        "upsert_rows": [
            {"id": 3, "vector": [0.5, 0.6], "kind": "walrus", "weight": 3.0},
        ]
    }


def test_upsert_from_dataframe_invalid_batch_size(namespace):
    with pytest.raises(ValueError, match="batch_size must be positive"):
        namespace.upsert_from_dataframe(pd.DataFrame({"id": [1]}), batch_size=0)


def test_upsert_from_dataframe_numeric_columns(namespace, handler):
    df = pd.DataFrame({"id": [1, 2], "score": [0.5, 1.5]})

    assert namespace.upsert_from_dataframe(df) == 2
    assert handler.last_body == {
        "upsert_rows": [{"id": 1, "score": 0.5}, {"id": 2, "score": 1.5}]
    }


def test_namespace_name_is_escaped_in_path():
    handler = RecordingHandler(payload={})
    namespace = make_namespace(handler, name="a/b?c#d")

    namespace.delete_all()
    namespace.query(top_k=1)

    assert handler.requests[0].url.raw_path == b"/v2/namespaces/a%2Fb%3Fc%23d"
    assert handler.requests[1].url.raw_path == b"/v2/namespaces/a%2Fb%3Fc%23d/query"
    assert all(not r.url.query for r in handler.requests)
