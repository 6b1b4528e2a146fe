# src/colsieve/engine/runner.py
"""In-process driver for a single filter transaction.

run_filter() plays the orchestrator's part:

1. transaction(): the filter validates its config and proposes an output
   schema through the control callback. Exactly one call is expected.
2. Negotiation: the optional acceptor sees the proposed schema. Rejecting
   it aborts the transaction before any page flows.
3. open(): the filter returns the PageOutput bound to both schemas.
4. Pages are fed strictly in order, then finish() is called.
5. close() is ALWAYS called, including when any step above raised.

Errors propagate unchanged. There is no retry here.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from colsieve.contracts.errors import PreconditionViolationError, SchemaNegotiationError
from colsieve.contracts.page import Page, PageOutput
from colsieve.contracts.schema import Schema
from colsieve.core.logging import bound_transaction, get_logger
from colsieve.plugins.protocols import FilterProtocol

logger = get_logger(__name__)

# Returns False to reject the proposed output schema.
SchemaAcceptor = Callable[[Schema], bool]


@dataclass(frozen=True, slots=True)
class FilterRunResult:
    """Summary of one completed transaction."""

    transaction_id: str
    output_schema: Schema
    pages_in: int
    records_in: int


@dataclass(slots=True)
class _Negotiation:
    task: dict[str, Any] | None = None
    output_schema: Schema | None = None
    calls: int = 0

    def __call__(self, task: dict[str, Any], output_schema: Schema) -> None:
        self.calls += 1
        if self.calls > 1:
            raise PreconditionViolationError("Filter called control() more than once in a transaction")
        self.task = task
        self.output_schema = output_schema


def negotiate(
    plugin: FilterProtocol,
    config: dict[str, Any],
    input_schema: Schema,
    *,
    accept_schema: SchemaAcceptor | None = None,
) -> tuple[dict[str, Any], Schema]:
    """Run the filter's transaction and the acceptance check.

    Returns:
        (task, output_schema)

    Raises:
        ConfigurationError: From the filter, if its config is invalid
        SchemaNegotiationError: If accept_schema rejects the output schema
        PreconditionViolationError: If the filter never called control()
    """
    negotiation = _Negotiation()
    plugin.transaction(config, input_schema, negotiation)

    if negotiation.task is None or negotiation.output_schema is None:
        raise PreconditionViolationError(f"Filter '{plugin.name}' returned from transaction() without calling control()")

    if accept_schema is not None and not accept_schema(negotiation.output_schema):
        raise SchemaNegotiationError(f"Output schema of filter '{plugin.name}' was rejected: {negotiation.output_schema.to_specs()}")

    return negotiation.task, negotiation.output_schema


def run_filter(
    plugin: FilterProtocol,
    config: dict[str, Any],
    input_schema: Schema,
    pages: Iterable[Page],
    output: PageOutput,
    *,
    accept_schema: SchemaAcceptor | None = None,
    transaction_id: str | None = None,
) -> FilterRunResult:
    """Negotiate, then stream every page through the filter into `output`.

    `output` is closed by the filter's PageOutput once open() succeeded. If
    negotiation fails nothing is opened and `output` is left untouched.
    """
    txn_id = transaction_id or uuid.uuid4().hex

    with bound_transaction(transaction_id=txn_id, plugin=plugin.name):
        task, output_schema = negotiate(plugin, config, input_schema, accept_schema=accept_schema)

        page_output = plugin.open(task, input_schema, output_schema, output)
        pages_in = 0
        records_in = 0
        try:
            for page in pages:
                page_output.add(page)
                pages_in += 1
                records_in += page.record_count
            page_output.finish()
        except Exception:
            logger.error("Transaction aborted", pages_in=pages_in, records_in=records_in, exc_info=True)
            raise
        finally:
            page_output.close()

        logger.debug("Transaction complete", pages_in=pages_in, records_in=records_in)

    return FilterRunResult(
        transaction_id=txn_id,
        output_schema=output_schema,
        pages_in=pages_in,
        records_in=records_in,
    )
