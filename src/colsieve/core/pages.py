# src/colsieve/core/pages.py
"""Record cursors over pages.

PageReader walks the records of one page at a time; PageBuilder assembles
output records into a buffer and hands full pages downstream.

Both are single-owner objects. They are reused across records (and, for the
reader, across pages) to avoid per-record allocation. Never share one between
two transcoders.

Trust model:
    Cursors are bound to a schema. Asking for a column the schema does not
    have, or for a type the column does not carry, means the caller's lookup
    table was built against a different schema. That is a bug, not bad data,
    so every mismatch raises PreconditionViolationError immediately.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, assert_never

from colsieve.contracts.enums import ValueType
from colsieve.contracts.errors import PreconditionViolationError
from colsieve.contracts.page import Page, PageOutput
from colsieve.contracts.schema import Column, Schema

DEFAULT_PAGE_SIZE = 4096

# Python classes accepted for a non-null JSON cell
_JSON_CLASSES: tuple[type, ...] = (dict, list, str, int, float, bool)


def _check_value(column: Column, value: Any, expected: ValueType) -> None:
    """Verify a non-null value belongs to the column's value type.

    bool is a subclass of int, so it must be excluded from LONG explicitly.
    """
    if value is None:
        raise PreconditionViolationError(f"Null value passed to typed accessor for column '{column.name}'; use set_null()/is_null()")

    match expected:
        case ValueType.BOOLEAN:
            ok = isinstance(value, bool)
        case ValueType.LONG:
            ok = isinstance(value, int) and not isinstance(value, bool)
        case ValueType.DOUBLE:
            ok = isinstance(value, float)
        case ValueType.STRING:
            ok = isinstance(value, str)
        case ValueType.TIMESTAMP:
            ok = isinstance(value, datetime)
        case ValueType.JSON:
            ok = isinstance(value, _JSON_CLASSES)
        case _:
            assert_never(expected)

    if not ok:
        raise PreconditionViolationError(
            f"Column '{column.name}' ({expected.value}) holds a value of type {type(value).__name__}: {value!r}"
        )


class BufferAllocator:
    """Hands out record buffers and tracks which are still live.

    The page size is the number of records a buffer holds before the builder
    flushes it downstream.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.page_size = page_size
        self._live: dict[int, list[tuple[Any, ...]]] = {}

    @property
    def live_buffers(self) -> int:
        return len(self._live)

    def allocate(self) -> list[tuple[Any, ...]]:
        buffer: list[tuple[Any, ...]] = []
        self._live[id(buffer)] = buffer
        return buffer

    def release(self, buffer: list[tuple[Any, ...]]) -> None:
        """Return a buffer to the allocator.

        Raises:
            PreconditionViolationError: If the buffer is not live (double release)
        """
        if self._live.get(id(buffer)) is not buffer:
            raise PreconditionViolationError("Buffer released twice or not allocated by this allocator")
        del self._live[id(buffer)]
        buffer.clear()


class PageReader:
    """Cursor over the records of a page, bound to an input schema.

    Usage:
        reader = PageReader(schema)
        reader.set_page(page)
        while reader.next_record():
            if not reader.is_null(column):
                value = reader.get_long(column)
    """

    def __init__(self, schema: Schema) -> None:
        self._schema = schema
        self._records: tuple[tuple[Any, ...], ...] = ()
        self._position = -1
        self._current: tuple[Any, ...] | None = None

    @property
    def schema(self) -> Schema:
        return self._schema

    def set_page(self, page: Page) -> None:
        self._records = page.records
        self._position = -1
        self._current = None

    def next_record(self) -> bool:
        """Advance to the next record. Returns False when the page is exhausted."""
        self._position += 1
        if self._position >= len(self._records):
            self._current = None
            return False

        record = self._records[self._position]
        if len(record) != self._schema.size:
            raise PreconditionViolationError(
                f"Record {self._position} has {len(record)} cells but the reader schema has {self._schema.size} columns"
            )
        self._current = record
        return True

    def _cell(self, column: Column) -> Any:
        if self._current is None:
            raise PreconditionViolationError("No current record: call next_record() first")
        if column.index >= self._schema.size or self._schema.get_column(column.index) != column:
            raise PreconditionViolationError(f"Column {column!r} is not part of the reader schema")
        return self._current[column.index]

    def _typed(self, column: Column, expected: ValueType) -> Any:
        if column.value_type is not expected:
            raise PreconditionViolationError(f"Column '{column.name}' is {column.value_type.value}, not {expected.value}")
        value = self._cell(column)
        _check_value(column, value, expected)
        return value

    def is_null(self, column: Column) -> bool:
        return self._cell(column) is None

    def get_boolean(self, column: Column) -> bool:
        return self._typed(column, ValueType.BOOLEAN)  # type: ignore[no-any-return]

    def get_long(self, column: Column) -> int:
        return self._typed(column, ValueType.LONG)  # type: ignore[no-any-return]

    def get_double(self, column: Column) -> float:
        return self._typed(column, ValueType.DOUBLE)  # type: ignore[no-any-return]

    def get_string(self, column: Column) -> str:
        return self._typed(column, ValueType.STRING)  # type: ignore[no-any-return]

    def get_timestamp(self, column: Column) -> datetime:
        return self._typed(column, ValueType.TIMESTAMP)  # type: ignore[no-any-return]

    def get_json(self, column: Column) -> Any:
        return self._typed(column, ValueType.JSON)

    def close(self) -> None:
        self._records = ()
        self._current = None


class PageBuilder:
    """Assembles output records and flushes full pages to a PageOutput.

    Cells not set before add_record() are null. When the buffer reaches the
    allocator's page size it is flushed as one Page.

    Lifecycle:
        [set_* ... add_record()]*  ->  finish()  ->  close()

    close() releases the buffer and closes the downstream output. It is
    idempotent and safe to call without finish() (error path); records still
    buffered at that point are discarded.
    """

    def __init__(self, allocator: BufferAllocator, schema: Schema, output: PageOutput) -> None:
        self._allocator = allocator
        self._schema = schema
        self._output = output
        self._buffer: list[tuple[Any, ...]] | None = allocator.allocate()
        self._row: list[Any] = [None] * schema.size
        self._closed = False
        self.pages_flushed = 0
        self.records_added = 0

    @property
    def schema(self) -> Schema:
        return self._schema

    def _check_index(self, index: int, expected: ValueType | None) -> Column:
        if self._closed:
            raise PreconditionViolationError("PageBuilder is closed")
        if not 0 <= index < self._schema.size:
            raise PreconditionViolationError(f"Output index {index} is out of range for a schema of {self._schema.size} columns")
        column = self._schema.get_column(index)
        if expected is not None and column.value_type is not expected:
            raise PreconditionViolationError(f"Output column '{column.name}' is {column.value_type.value}, not {expected.value}")
        return column

    def _set(self, index: int, value: Any, expected: ValueType) -> None:
        column = self._check_index(index, expected)
        _check_value(column, value, expected)
        self._row[index] = value

    def set_null(self, index: int) -> None:
        self._check_index(index, None)
        self._row[index] = None

    def set_boolean(self, index: int, value: bool) -> None:
        self._set(index, value, ValueType.BOOLEAN)

    def set_long(self, index: int, value: int) -> None:
        self._set(index, value, ValueType.LONG)

    def set_double(self, index: int, value: float) -> None:
        self._set(index, value, ValueType.DOUBLE)

    def set_string(self, index: int, value: str) -> None:
        self._set(index, value, ValueType.STRING)

    def set_timestamp(self, index: int, value: datetime) -> None:
        self._set(index, value, ValueType.TIMESTAMP)

    def set_json(self, index: int, value: Any) -> None:
        self._set(index, value, ValueType.JSON)

    def add_record(self) -> None:
        """Seal the current record and start a new, all-null one."""
        if self._closed or self._buffer is None:
            raise PreconditionViolationError("PageBuilder is closed")
        self._buffer.append(tuple(self._row))
        self._row = [None] * self._schema.size
        self.records_added += 1
        if len(self._buffer) >= self._allocator.page_size:
            self.flush()

    def flush(self) -> None:
        """Send buffered records downstream as one page (no-op when empty)."""
        if self._buffer:
            page = Page(tuple(self._buffer))
            self._buffer.clear()
            self._output.add(page)
            self.pages_flushed += 1

    def finish(self) -> None:
        if self._closed:
            raise PreconditionViolationError("PageBuilder is closed")
        self.flush()
        self._output.finish()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            if self._buffer is not None:
                self._allocator.release(self._buffer)
                self._buffer = None
        finally:
            self._output.close()
