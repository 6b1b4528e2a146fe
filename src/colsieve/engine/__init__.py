"""Engine: drives one filter through negotiation and page streaming."""

from colsieve.engine.runner import FilterRunResult, SchemaAcceptor, run_filter

__all__ = ["FilterRunResult", "SchemaAcceptor", "run_filter"]
