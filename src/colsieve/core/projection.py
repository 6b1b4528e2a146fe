# src/colsieve/core/projection.py
"""Column projection: resolve a remove/keep directive against a schema.

resolve_projection() is called once per transaction, before any page flows.
It validates the directive, derives the output schema and builds the lookup
table that maps every input column index to its output index (or None when
the column is projected out).

Guarantees of the derived output schema:
- It is a sub-sequence of the input schema (same relative order)
- Every retained column keeps its name and type
- Repeating a name in the directive has no additional effect
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from colsieve.contracts.enums import SelectionMode
from colsieve.contracts.errors import ConfigurationError, PreconditionViolationError
from colsieve.contracts.schema import Schema
from colsieve.core.logging import get_logger

if TYPE_CHECKING:
    from colsieve.plugins.filters.remove_columns import RemoveColumnsConfig

logger = get_logger(__name__)

# Indexed by input column index; None = projected out.
LookupTable = tuple[int | None, ...]


@dataclass(frozen=True, slots=True)
class ColumnProjection:
    """Result of resolving a directive against an input schema.

    Attributes:
        mode: Whether the directive removed or kept the named columns
        output_schema: Derived schema (input order, same names and types)
        lookup: Output index per input column index, None when dropped
        unmatched: Directive names skipped because accept_unmatched_columns was set
    """

    mode: SelectionMode
    output_schema: Schema
    lookup: LookupTable
    unmatched: tuple[str, ...] = ()

    @property
    def dropped_columns(self) -> int:
        return sum(1 for index in self.lookup if index is None)


def _select_mode(directive: RemoveColumnsConfig) -> tuple[SelectionMode, Sequence[str]]:
    if directive.remove is not None and directive.keep is not None:
        raise ConfigurationError("remove: and keep: must not be multi-select")
    if directive.remove is not None:
        return SelectionMode.REMOVE, directive.remove
    if directive.keep is not None:
        return SelectionMode.KEEP, directive.keep
    raise ConfigurationError("Must require remove: or keep:")


def match_columns(
    schema: Schema,
    names: Sequence[str],
    *,
    accept_unmatched: bool,
) -> tuple[frozenset[str], tuple[str, ...]]:
    """Split directive names into those present in the schema and the rest.

    Returns:
        (matched names, unmatched names in directive order, de-duplicated)

    Raises:
        ConfigurationError: On the first unmatched name when accept_unmatched is False
    """
    matched: set[str] = set()
    unmatched: list[str] = []
    for name in names:
        if schema.has_column(name):
            matched.add(name)
            continue
        if not accept_unmatched:
            raise ConfigurationError(f"Column '{name}' doesn't exist in the schema")
        if name not in unmatched:
            unmatched.append(name)
    return frozenset(matched), tuple(unmatched)


def build_lookup_table(input_schema: Schema, output_schema: Schema) -> LookupTable:
    """Map input column indexes to output column indexes by name.

    Raises:
        PreconditionViolationError: If the output schema is not a projection of
            the input schema (unknown name or changed type)
    """
    for column in output_schema:
        if not input_schema.has_column(column.name):
            raise PreconditionViolationError(f"Output column '{column.name}' does not exist in the input schema")
        source = input_schema.lookup_column(column.name)
        if source.value_type is not column.value_type:
            raise PreconditionViolationError(
                f"Output column '{column.name}' is {column.value_type.value} but input column is {source.value_type.value}"
            )

    return tuple(output_schema.lookup_column(column.name).index if output_schema.has_column(column.name) else None for column in input_schema)


def resolve_projection(input_schema: Schema, directive: RemoveColumnsConfig) -> ColumnProjection:
    """Derive the output schema and lookup table for a directive.

    Args:
        input_schema: Schema of incoming pages
        directive: Validated remove/keep configuration

    Returns:
        ColumnProjection for this transaction

    Raises:
        ConfigurationError: If both or neither of remove/keep are set, or a
            name is missing and accept_unmatched_columns is False
    """
    mode, names = _select_mode(directive)
    matched, unmatched = match_columns(input_schema, names, accept_unmatched=directive.accept_unmatched_columns)

    if unmatched:
        logger.debug("Skipping unmatched columns", mode=mode.value, columns=list(unmatched))

    builder = Schema.builder()
    for column in input_schema:
        selected = column.name in matched
        if selected == (mode is SelectionMode.KEEP):
            builder.add(column.name, column.value_type)
    output_schema = builder.build()

    return ColumnProjection(
        mode=mode,
        output_schema=output_schema,
        lookup=build_lookup_table(input_schema, output_schema),
        unmatched=unmatched,
    )
