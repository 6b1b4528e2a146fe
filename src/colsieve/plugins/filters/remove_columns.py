"""RemoveColumns filter plugin.

Drops (remove:) or retains (keep:) named columns. The output schema is always
a sub-sequence of the input schema: no renaming, reordering or retyping.

Example YAML:
    filter:
      plugin: remove_columns
      options:
        remove: [name, ssn]
        accept_unmatched_columns: false
"""

from typing import Any

from pydantic import Field

from colsieve.contracts.page import PageOutput
from colsieve.contracts.schema import Schema
from colsieve.core.logging import get_logger
from colsieve.core.pages import PageBuilder, PageReader
from colsieve.core.projection import resolve_projection
from colsieve.core.transcoder import RecordTranscoder
from colsieve.plugins.base import BaseFilter
from colsieve.plugins.config_base import PluginConfig
from colsieve.plugins.protocols import FilterControl

logger = get_logger(__name__)


class RemoveColumnsConfig(PluginConfig):
    """Column selection directive.

    Exactly one of remove/keep must be set. That check lives in
    resolve_projection() rather than in a validator, so the error is a
    ConfigurationError with the same message whichever entry point is used.
    """

    remove: list[str] | None = Field(default=None, description="Columns to drop")
    keep: list[str] | None = Field(default=None, description="Columns to retain (input order is preserved)")
    accept_unmatched_columns: bool = Field(
        default=False,
        description="If True, names missing from the input schema are ignored instead of rejected",
    )


class RemoveColumnsFilter(BaseFilter):
    """Drop or keep named columns, streaming page by page.

    Config options:
        remove: Column names to drop
        keep: Column names to retain (mutually exclusive with remove)
        accept_unmatched_columns: Ignore names not in the input schema (default: False)
    """

    name = "remove_columns"
    plugin_version = "1.0.0"

    def transaction(
        self,
        config: dict[str, Any],
        input_schema: Schema,
        control: FilterControl,
    ) -> None:
        """Resolve the projection and hand the output schema to the orchestrator.

        Raises:
            ConfigurationError: If the directive is ambiguous, missing, or names
                an unknown column without accept_unmatched_columns
        """
        cfg = RemoveColumnsConfig.from_dict(config)
        projection = resolve_projection(input_schema, cfg)

        logger.info(
            "Resolved column projection",
            plugin=self.name,
            mode=projection.mode.value,
            input_columns=input_schema.size,
            output_columns=projection.output_schema.size,
            dropped=projection.dropped_columns,
        )

        control(cfg.to_task(), projection.output_schema)

    def open(
        self,
        task: dict[str, Any],
        input_schema: Schema,
        output_schema: Schema,
        output: PageOutput,
    ) -> RecordTranscoder:
        # Rejects tasks that did not come out of transaction()
        RemoveColumnsConfig.from_dict(task)

        reader = PageReader(input_schema)
        builder = PageBuilder(self.allocator, output_schema, output)
        try:
            return RecordTranscoder(reader, builder)
        except Exception:
            builder.close()
            raise
