import math
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

from ._constants import ID_FIELD, VECTOR_FIELD
from .errors import ValidationError

RowId = Union[int, str]
RowAttributeValue = Union[
    str, int, float, bool, None, List[Any], Dict[str, Any]
]
RowAttributesTypedDict = Dict[str, RowAttributeValue]
RowTuple = Tuple[RowId, List[float]]
RowTupleWithAttributes = Tuple[RowId, List[float], RowAttributesTypedDict]


class Row(NamedTuple):
    """Row representation with ID, optional vector, and attributes"""

    id: RowId
    vector: Optional[List[float]] = None
    attributes: Optional[RowAttributesTypedDict] = None

    def __repr__(self) -> str:
        return f"Row(id={self.id}, vector={self.vector}, attributes={self.attributes})"


RowLike = Union[Row, RowTuple, RowTupleWithAttributes, Dict[str, Any]]


def _to_list(value: Any) -> Any:
    # numpy arrays and pandas values
    if hasattr(value, "tolist") and not isinstance(value, (str, bytes)):
        return value.tolist()
    return value


def _check_row_id(row_id: Any) -> RowId:
    row_id = _to_list(row_id)
    if isinstance(row_id, bool) or not isinstance(row_id, (int, str)):
        raise ValidationError(
            f"Row id must be an integer or a string, got {type(row_id).__name__}"
        )
    return row_id


def _format_vector_values(vector: Any) -> List[float]:
    """
    Validate vector values and convert them to a plain list of floats.

    Args:
        vector: Sequence (or array) of numeric vector components

    Returns:
        List of floats suitable for JSON encoding

    Raises:
        ValidationError: If a component is not a finite number
    """
    vector = _to_list(vector)
    if isinstance(vector, (str, bytes, dict)) or not isinstance(vector, (list, tuple)):
        raise ValidationError(
            f"Row vector must be a list of numbers, got {type(vector).__name__}"
        )
    values = []
    for component in vector:
        component = _to_list(component)
        if isinstance(component, bool) or not isinstance(component, (int, float)):
            raise ValidationError(
                f"Row vector components must be numbers, got {type(component).__name__}"
            )
        if not math.isfinite(component):
            raise ValidationError("Row vector components must be finite")
        values.append(float(component))
    return values


def _format_attribute_value(name: str, value: Any) -> RowAttributeValue:
    """Check that an attribute value is JSON-compatible, converting tuples and arrays to lists."""
    value = _to_list(value)
    if value is None or isinstance(value, (str, bool, int)):
        return value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"Attribute {name!r} must be finite, got {value!r}")
        return value
    elif isinstance(value, (list, tuple)):
        return [_format_attribute_value(name, item) for item in value]
    elif isinstance(value, dict):
        formatted = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValidationError(
                    f"Attribute {name!r} object keys must be strings, got {key!r}"
                )
            formatted[key] = _format_attribute_value(name, item)
        return formatted
    else:
        raise ValidationError(
            f"Unsupported value type for attribute {name!r}: {type(value).__name__}"
        )


def _extract_row_data(row: RowLike) -> Dict[str, Any]:
    """
    Flatten a row in any supported format into the wire representation.

    Handles Row instances, flat dictionaries and (id, vector[, attributes])
    tuples, and validates the id, the vector and every attribute value.

    Args:
        row: Row in one of the supported formats

    Returns:
        Flat dictionary of attribute name to value, always containing "id"

    Raises:
        ValidationError: If the row format is invalid or a value is not JSON-compatible
    """
    if isinstance(row, Row):
        # Handle Row instances (checked before tuple, Row is one)
        row_id, vector, attributes = row.id, row.vector, row.attributes
    elif isinstance(row, dict):
        # Handle flat dictionary format
        if ID_FIELD not in row:
            raise ValidationError(f"Row is missing the {ID_FIELD!r} key: {row!r}")
        attributes = dict(row)
        row_id = attributes.pop(ID_FIELD)
        vector = attributes.pop(VECTOR_FIELD, None)
    elif isinstance(row, tuple):
        # Handle tuple formats with different lengths
        if len(row) == 2:
            row_id, vector, attributes = row[0], row[1], None
        elif len(row) == 3:
            row_id, vector, attributes = row
        else:
            raise ValidationError(
                f"Invalid row tuple length: {len(row)}. Expected 2 or 3 elements."
            )
    else:
        raise ValidationError(
            f"Unsupported row type: {type(row).__name__}. Expected Row, dict, or tuple."
        )

    data: Dict[str, Any] = {ID_FIELD: _check_row_id(row_id)}
    if vector is not None:
        data[VECTOR_FIELD] = _format_vector_values(vector)

    for name, value in (attributes or {}).items():
        if not isinstance(name, str) or not name:
            raise ValidationError(f"Attribute name must be a non-empty string, got {name!r}")
        if name in data:
            raise ValidationError(f"Attribute {name!r} is set twice on row {data[ID_FIELD]!r}")
        data[name] = _format_attribute_value(name, value)

    return data
