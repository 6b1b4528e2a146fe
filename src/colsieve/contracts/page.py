"""Page: the unit of streaming between pipeline stages.

A page is an immutable batch of records. Each record is a tuple with one cell
per schema column, where None marks a null cell. Pages carry no schema of
their own - PageReader and PageBuilder are bound to one.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class Page:
    """Immutable batch of records.

    Attributes:
        records: Records in arrival order, each a tuple of cell values
    """

    records: tuple[tuple[Any, ...], ...] = ()

    @classmethod
    def of(cls, *records: tuple[Any, ...]) -> "Page":
        return cls(tuple(tuple(record) for record in records))

    @property
    def record_count(self) -> int:
        return len(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(self.records)


@runtime_checkable
class PageOutput(Protocol):
    """Downstream consumer of pages.

    Lifecycle:
        add(page)*  ->  finish()  ->  close()

    close() is always called, including after errors, and must tolerate being
    called without a preceding finish().
    """

    def add(self, page: Page) -> None: ...

    def finish(self) -> None: ...

    def close(self) -> None: ...
