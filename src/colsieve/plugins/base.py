# src/colsieve/plugins/base.py
"""Base classes for plugin implementations.

Filters MUST subclass BaseFilter. The manager registers plugin classes, and
the base class supplies the allocator wiring every filter needs.

Lifecycle Contract (orchestrator, single thread):
    transaction(config, input_schema, control)
        -> open(task, input_schema, output_schema, output)
        -> output.add(page)* -> output.finish() -> output.close()

- transaction: Runs once per pipeline transaction. Raises ConfigurationError
  before any data moves if the config is unusable.
- open: Binds cursors to the negotiated schemas. The returned PageOutput is
  owned by the caller, who must close() it even on error.
"""

from abc import ABC, abstractmethod
from typing import Any

from colsieve.contracts.page import PageOutput
from colsieve.contracts.schema import Schema
from colsieve.core.pages import BufferAllocator
from colsieve.plugins.protocols import FilterControl


class BaseFilter(ABC):
    """Base class for schema-changing page filters.

    Subclasses set `name` and implement transaction() and open().

    Example:
        class MyFilter(BaseFilter):
            name = "my_filter"

            def transaction(self, config, input_schema, control):
                control(config, input_schema)

            def open(self, task, input_schema, output_schema, output):
                ...
    """

    name: str
    plugin_version: str = "0.0.0"

    def __init__(self, allocator: BufferAllocator | None = None) -> None:
        """Initialize with the buffer allocator backing output pages.

        Args:
            allocator: Allocator for output buffers (default page size if None)
        """
        self.allocator = allocator if allocator is not None else BufferAllocator()

    @abstractmethod
    def transaction(
        self,
        config: dict[str, Any],
        input_schema: Schema,
        control: FilterControl,
    ) -> None:
        """Validate config, derive the output schema and call control(task, output_schema)."""

    @abstractmethod
    def open(
        self,
        task: dict[str, Any],
        input_schema: Schema,
        output_schema: Schema,
        output: PageOutput,
    ) -> PageOutput:
        """Return the PageOutput that rewrites input pages into `output`."""
