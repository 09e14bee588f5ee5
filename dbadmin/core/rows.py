from typing import Any, Dict, Mapping


def shape_value(value: Any) -> Any:
    """
    Make a single cell JSON safe.

    Binary values (BLOB, BINARY, ``X'..'`` literals) are rendered as
    ``{"type": "Buffer", "data": [...]}``, the shape Node's mysql2 client hands
    to the front end.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return {"type": "Buffer", "data": list(bytes(value))}
    return value


def shape_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: shape_value(value) for key, value in row.items()}
