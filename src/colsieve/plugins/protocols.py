# src/colsieve/plugins/protocols.py
"""Plugin protocols defining the contracts for each plugin type.

They're used for type checking, not runtime enforcement (that's pluggy's job
at registration and the base classes' job at subclass time).

Plugin Types:
- Filter: Derives an output schema from an input schema, then rewrites pages
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from colsieve.contracts.page import PageOutput
    from colsieve.contracts.schema import Schema

# Orchestrator callback: (task, output_schema) -> None.
# The filter calls it exactly once per transaction with its derived schema.
FilterControl = Callable[[dict[str, Any], "Schema"], None]


@runtime_checkable
class FilterProtocol(Protocol):
    """Protocol for filter plugins.

    Lifecycle:
    1. __init__() - Plugin instantiation
    2. transaction(config, input_schema, control) - Validate config, derive
       output schema, hand both to the orchestrator via control()
    3. open(task, input_schema, output_schema, output) - Return the PageOutput
       that upstream feeds pages into

    Example:
        class DropAll:
            name = "drop_all"
            plugin_version = "1.0.0"

            def transaction(self, config, input_schema, control):
                control(dict(config), Schema())

            def open(self, task, input_schema, output_schema, output):
                return RecordTranscoder(PageReader(input_schema), PageBuilder(...))
    """

    name: str
    plugin_version: str

    def transaction(
        self,
        config: dict[str, Any],
        input_schema: "Schema",
        control: FilterControl,
    ) -> None:
        """Resolve the output schema and pass it to control()."""
        ...

    def open(
        self,
        task: dict[str, Any],
        input_schema: "Schema",
        output_schema: "Schema",
        output: "PageOutput",
    ) -> "PageOutput":
        """Return the page sink bound to the negotiated schemas."""
        ...
