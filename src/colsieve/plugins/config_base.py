# src/colsieve/plugins/config_base.py
"""Base classes for typed plugin configurations.

Plugins inherit from PluginConfig to get:
- Strict validation (reject unknown fields)
- A factory method that wraps pydantic errors in PluginConfigError

Example usage:
    class MyFilterConfig(PluginConfig):
        columns: list[str]

    cfg = MyFilterConfig.from_dict(config)
"""

from typing import Any, Self

from pydantic import BaseModel, ValidationError

from colsieve.contracts.errors import ConfigurationError


class PluginConfigError(ConfigurationError):
    """Raised when plugin configuration is invalid."""

    pass


class PluginConfig(BaseModel):
    """Base class for typed plugin configurations.

    Configs are frozen: a validated config is dumped into the task dict passed
    between transaction() and open(), and re-validated on the other side.
    """

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with clear error on validation failure.

        Raises:
            PluginConfigError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.")

        try:
            return cls.model_validate(dict(config))
        except ValidationError as e:
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: {e}") from e

    def to_task(self) -> dict[str, Any]:
        """Dump to a plain dict that from_dict() accepts back unchanged."""
        return self.model_dump(mode="json")
