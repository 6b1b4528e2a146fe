# src/colsieve/core/transcoder.py
"""Record transcoder: copy retained columns from input pages to output pages.

The transcoder is the PageOutput handed upstream by a filter's open(). For
every record of every page it walks the input columns in schema order,
consults the lookup table and copies each retained cell (value or null) into
its output position, then seals the output record.

There is NO per-record validation of the projection itself: the lookup table
is rebuilt from the negotiated schemas at construction and any mismatch that
surfaces later is a PreconditionViolationError from the cursors.
"""

from __future__ import annotations

from typing import assert_never

from colsieve.contracts.enums import ValueType
from colsieve.contracts.page import Page
from colsieve.contracts.schema import Column
from colsieve.core.logging import get_logger
from colsieve.core.pages import PageBuilder, PageReader
from colsieve.core.projection import LookupTable, build_lookup_table

logger = get_logger(__name__)


def copy_column(reader: PageReader, builder: PageBuilder, column: Column, index: int) -> None:
    """Copy one cell of the current record from reader to builder.

    The dispatch is exhaustive over ValueType. Adding a member to ValueType
    without a branch here fails type checking (assert_never) and, at runtime,
    raises AssertionError instead of silently dropping the column.
    """
    if reader.is_null(column):
        builder.set_null(index)
        return

    match column.value_type:
        case ValueType.BOOLEAN:
            builder.set_boolean(index, reader.get_boolean(column))
        case ValueType.LONG:
            builder.set_long(index, reader.get_long(column))
        case ValueType.DOUBLE:
            builder.set_double(index, reader.get_double(column))
        case ValueType.STRING:
            builder.set_string(index, reader.get_string(column))
        case ValueType.TIMESTAMP:
            builder.set_timestamp(index, reader.get_timestamp(column))
        case ValueType.JSON:
            builder.set_json(index, reader.get_json(column))
        case _:
            assert_never(column.value_type)


class RecordTranscoder:
    """Streams pages through a column projection.

    Owns its reader and builder exclusively for the life of the transaction.

    Lifecycle:
        add(page)*  ->  finish()  ->  close()

    close() is idempotent and must be called even when add() or finish()
    raised.
    """

    def __init__(self, reader: PageReader, builder: PageBuilder) -> None:
        self._reader = reader
        self._builder = builder
        self._lookup: LookupTable = build_lookup_table(reader.schema, builder.schema)
        self._columns: tuple[Column, ...] = reader.schema.columns
        self._closed = False
        self.pages_processed = 0
        self.records_processed = 0

    @property
    def lookup(self) -> LookupTable:
        return self._lookup

    def add(self, page: Page) -> None:
        """Transcode every record of a page, in order."""
        reader = self._reader
        builder = self._builder
        reader.set_page(page)
        while reader.next_record():
            for column, index in zip(self._columns, self._lookup, strict=True):
                if index is None:
                    continue
                copy_column(reader, builder, column, index)
            builder.add_record()
            self.records_processed += 1
        self.pages_processed += 1

    process_batch = add

    def finish(self) -> None:
        """Flush buffered output records downstream."""
        self._builder.finish()
        logger.info(
            "Projection finished",
            pages_in=self.pages_processed,
            records_in=self.records_processed,
            records_out=self._builder.records_added,
            pages_out=self._builder.pages_flushed,
        )

    def close(self) -> None:
        """Release reader and builder resources. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        self._reader.close()
        self._builder.close()
