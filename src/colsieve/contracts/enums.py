"""Closed enumerations shared across subsystem boundaries.

ValueType is the fixed set of cell types a schema column may carry. Code that
branches on it must handle every member (see core/transcoder.py).
"""

from enum import StrEnum


class ValueType(StrEnum):
    """Type of the values stored in a column.

    Values:
        BOOLEAN: Python bool
        LONG: Python int (bool is NOT accepted)
        DOUBLE: Python float
        STRING: Python str
        TIMESTAMP: datetime.datetime
        JSON: Any JSON-compatible value (dict, list, str, int, float, bool)
    """

    BOOLEAN = "boolean"
    LONG = "long"
    DOUBLE = "double"
    STRING = "string"
    TIMESTAMP = "timestamp"
    JSON = "json"


# Spellings accepted in column specs in addition to the canonical values.
VALUE_TYPE_ALIASES: dict[str, ValueType] = {
    "bool": ValueType.BOOLEAN,
    "int": ValueType.LONG,
    "integer": ValueType.LONG,
    "float": ValueType.DOUBLE,
    "str": ValueType.STRING,
    "text": ValueType.STRING,
}


def parse_value_type(name: str) -> ValueType:
    """Resolve a type name or alias to a ValueType.

    Raises:
        ValueError: If the name is neither a canonical type nor an alias
    """
    normalized = name.strip().lower()
    if normalized in VALUE_TYPE_ALIASES:
        return VALUE_TYPE_ALIASES[normalized]
    try:
        return ValueType(normalized)
    except ValueError:
        supported = sorted({*(t.value for t in ValueType), *VALUE_TYPE_ALIASES})
        raise ValueError(f"Unknown type '{name}'. Supported types: {', '.join(supported)}") from None


class SelectionMode(StrEnum):
    """Which way a column selection directive is applied."""

    REMOVE = "remove"
    KEEP = "keep"
