"""Shared contracts: types that cross module boundaries.

Everything here is dependency-free and immutable, so it can be imported from
any layer (core, plugins, engine, cli) without cycles.
"""

from colsieve.contracts.enums import VALUE_TYPE_ALIASES, SelectionMode, ValueType, parse_value_type
from colsieve.contracts.errors import (
    ConfigurationError,
    PreconditionViolationError,
    SchemaConfigError,
    SchemaNegotiationError,
)
from colsieve.contracts.page import Page, PageOutput
from colsieve.contracts.schema import Column, Schema, SchemaBuilder

__all__ = [
    "VALUE_TYPE_ALIASES",
    "Column",
    "ConfigurationError",
    "Page",
    "PageOutput",
    "PreconditionViolationError",
    "Schema",
    "SchemaBuilder",
    "SchemaConfigError",
    "SchemaNegotiationError",
    "SelectionMode",
    "ValueType",
    "parse_value_type",
]
