"""Exception types raised across colsieve.

Two families, with different handling:

- ConfigurationError: the user's configuration is wrong. Raised while
  parsing options or resolving a projection, before any record moves.
- PreconditionViolationError: our own code (or the embedding orchestrator)
  broke a contract, e.g. a lookup table built against a different schema than
  the one bound to the cursor. Never caught inside colsieve - crash the
  transaction.
"""


class ConfigurationError(Exception):
    """Raised when a configuration or selection directive is invalid."""

    pass


class SchemaConfigError(ConfigurationError):
    """Raised when a schema definition or column lookup is invalid."""

    pass


class SchemaNegotiationError(Exception):
    """Raised when the orchestrator rejects a derived output schema.

    No page has been processed when this is raised.
    """

    pass


class PreconditionViolationError(Exception):
    """Raised when an internal contract between components is broken.

    This indicates a bug in colsieve or in the code embedding it, not bad
    user input. It is never retried.
    """

    pass
