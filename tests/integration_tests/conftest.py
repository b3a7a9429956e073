"""
Shared fixtures for integration tests.

These tests talk to the live service and are skipped unless
TURBOPUFFER_API_KEY is set. Every namespace created by a test carries a
unique session prefix and is deleted afterwards.
"""

import os
import re
import uuid
from typing import Generator

import pytest

from puffstore import ApiError, DistanceMetric, NamespaceInterface, VectorDB


@pytest.fixture(scope="session")
def db() -> Generator[VectorDB, None, None]:
    """Client configured from the environment."""
    if not os.getenv("TURBOPUFFER_API_KEY"):
        pytest.skip("TURBOPUFFER_API_KEY not set")
    client = VectorDB.from_env()
    yield client
    client.close()


@pytest.fixture(scope="session")
def namespace_prefix() -> str:
    """Prefix shared by every namespace of this test session."""
    return f"puffstore_test_{uuid.uuid4().hex[:8]}_"


@pytest.fixture(scope="function")
def namespace(
    request, db: VectorDB, namespace_prefix: str
) -> Generator[NamespaceInterface, None, None]:
    """Provide an empty namespace and delete it after the test."""
    # Parametrized test ids contain characters not allowed in namespace names
    suffix = re.sub(r"[^A-Za-z0-9_-]", "_", request.node.name)
    ns = db.Namespace(f"{namespace_prefix}{suffix}")
    yield ns
    try:
        ns.delete_all()
    except ApiError as e:
        # Nothing to delete when the test never wrote
        if e.status_code != 404:
            raise


@pytest.fixture(scope="function")
def namespace_with_sample_data(namespace: NamespaceInterface) -> NamespaceInterface:
    """Provide a namespace with three rows of mixed attribute types."""
    namespace.upsert(
        [
            {"id": 1, "vector": [1.0, 2.0], "foo": "bar", "numbers": [1, 2, 3], "maybeNull": None, "bool": True},
            {"id": 2, "vector": [3.0, 4.0], "foo": "baz", "numbers": [2, 3, 4], "maybeNull": None, "bool": True},
            {"id": 3, "vector": [3.0, 4.0], "foo": "baz", "numbers": [17], "maybeNull": "oh boy!", "bool": True},
        ],
        distance_metric=DistanceMetric.COSINE_DISTANCE,
    )
    return namespace
