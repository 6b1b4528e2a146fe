"""Schema types: ordered, typed, immutable column lists.

A Schema is built once (via SchemaBuilder or from column specs) and never
mutated. Column indexes are dense and start at 0.

Column spec format, used by configuration files:
    - "id: long"
    - "name: string"
    - "payload: json"

Spec aliases are accepted for the type part (int, text, float, bool, str).
Column names are case-sensitive and may contain any character except that
they cannot be empty.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from colsieve.contracts.enums import ValueType, parse_value_type
from colsieve.contracts.errors import SchemaConfigError

# Pattern: "column_name: type". The name is everything before the LAST colon
# so names like "a:b" are still expressible.
COLUMN_SPEC_PATTERN = re.compile(r"^(.+):\s*([A-Za-z]+)$")


@dataclass(frozen=True, slots=True)
class Column:
    """A single named, typed column at a fixed position.

    Attributes:
        name: Column name, unique within its schema
        index: 0-based position in the schema
        value_type: Type of every non-null value in the column
    """

    name: str
    index: int
    value_type: ValueType

    @classmethod
    def parse(cls, spec: str, index: int) -> Column:
        """Parse a column spec string like "score: double".

        Raises:
            SchemaConfigError: If the spec is malformed or the type is unknown
        """
        match = COLUMN_SPEC_PATTERN.match(spec.strip())
        if not match:
            raise SchemaConfigError(f"Invalid column spec '{spec}'. Expected format: 'column_name: type'")

        name, type_name = match.groups()
        name = name.strip()
        if not name:
            raise SchemaConfigError(f"Invalid column spec '{spec}': column name cannot be empty")

        try:
            value_type = parse_value_type(type_name)
        except ValueError as e:
            raise SchemaConfigError(f"Invalid column spec '{spec}': {e}") from e

        return cls(name=name, index=index, value_type=value_type)

    def to_spec(self) -> str:
        return f"{self.name}: {self.value_type.value}"


@dataclass(frozen=True, slots=True)
class Schema:
    """Ordered sequence of columns.

    Use Schema.builder() or Schema.from_specs() rather than constructing
    directly; both guarantee dense indexes and unique names.
    """

    columns: tuple[Column, ...] = ()
    _by_name: dict[str, Column] = field(default_factory=dict, init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        by_name: dict[str, Column] = {}
        for position, column in enumerate(self.columns):
            if column.index != position:
                raise SchemaConfigError(f"Column '{column.name}' has index {column.index} but is at position {position}")
            if column.name in by_name:
                raise SchemaConfigError(f"Duplicate column name '{column.name}' in schema")
            by_name[column.name] = column
        # Frozen dataclass - populate the index cache via object.__setattr__
        object.__setattr__(self, "_by_name", by_name)

    @classmethod
    def builder(cls) -> SchemaBuilder:
        return SchemaBuilder()

    @classmethod
    def from_specs(cls, specs: Iterable[str]) -> Schema:
        """Build a schema from column spec strings.

        Example:
            Schema.from_specs(["id: long", "name: string", "score: double"])

        Raises:
            SchemaConfigError: If any spec is malformed or names repeat
        """
        return cls(tuple(Column.parse(spec, index) for index, spec in enumerate(specs)))

    @property
    def size(self) -> int:
        return len(self.columns)

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    def get_column(self, index: int) -> Column:
        return self.columns[index]

    def has_column(self, name: str) -> bool:
        return name in self._by_name

    def lookup_column(self, name: str) -> Column:
        """Find a column by exact (case-sensitive) name.

        Raises:
            SchemaConfigError: If no column has that name
        """
        if name not in self._by_name:
            raise SchemaConfigError(f"Column '{name}' is not found")
        return self._by_name[name]

    def to_specs(self) -> list[str]:
        return [column.to_spec() for column in self.columns]


class SchemaBuilder:
    """Accumulates (name, type) pairs and assigns indexes in call order."""

    def __init__(self) -> None:
        self._entries: list[tuple[str, ValueType]] = []

    def add(self, name: str, value_type: ValueType) -> SchemaBuilder:
        self._entries.append((name, value_type))
        return self

    def build(self) -> Schema:
        return Schema(tuple(Column(name=name, index=index, value_type=value_type) for index, (name, value_type) in enumerate(self._entries)))
