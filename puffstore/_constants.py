from urllib.parse import quote

DEFAULT_BASE_URL = "https://api.turbopuffer.com"
REGION_BASE_URL = "https://{region}.turbopuffer.com"
DEFAULT_TIMEOUT = 30.0

API_KEY_ENV = "TURBOPUFFER_API_KEY"
REGION_ENV = "TURBOPUFFER_REGION"
TIMEOUT_ENV = "TURBOPUFFER_TIMEOUT"


def _get_namespace_path(namespace: str, version: str = "v2") -> str:
    """Get the API path of a namespace, percent-encoding the name."""
    return f"/{version}/namespaces/{quote(namespace, safe='')}"


NAMESPACES_PATH = "/v1/namespaces"
QUERY_SUFFIX = "/query"
SCHEMA_SUFFIX = "/schema"
METADATA_SUFFIX = "/metadata"
HINT_CACHE_WARM_SUFFIX = "/hint_cache_warm"

# Row fields
ID_FIELD = "id"
VECTOR_FIELD = "vector"

# Write request fields
UPSERT_ROWS_FIELD = "upsert_rows"
PATCH_ROWS_FIELD = "patch_rows"
DELETES_FIELD = "deletes"
DELETE_BY_FILTER_FIELD = "delete_by_filter"
DISTANCE_METRIC_FIELD = "distance_metric"
SCHEMA_FIELD = "schema"

# Query request fields
RANK_BY_FIELD = "rank_by"
FILTERS_FIELD = "filters"
TOP_K_FIELD = "top_k"
INCLUDE_ATTRIBUTES_FIELD = "include_attributes"
