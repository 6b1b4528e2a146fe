# src/colsieve/core/config.py
"""
Configuration schema and loading for colsieve pipelines.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

Example YAML:
    input_schema:
      - "id: long"
      - "name: string"
      - "score: double"
    page_size: 4096
    filter:
      plugin: remove_columns
      options:
        remove: [name]
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from colsieve.contracts.errors import SchemaConfigError
from colsieve.contracts.schema import Schema
from colsieve.core.pages import DEFAULT_PAGE_SIZE


class FilterSettings(BaseModel):
    """Which filter plugin to run and the options handed to it.

    The options dict is validated by the plugin itself (see
    plugins/config_base.py), not here.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    plugin: str = Field(..., description="Registered filter plugin name")
    options: dict[str, Any] = Field(default_factory=dict, description="Plugin-specific options")

    @field_validator("plugin")
    @classmethod
    def validate_plugin_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("plugin name cannot be empty")
        return v.strip()


class LoggingSettings(BaseModel):
    """Logging output options."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: str = "INFO"
    json_output: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        normalized = v.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{v}'")
        return normalized


class ColsieveSettings(BaseModel):
    """Top-level settings for one projection step."""

    model_config = {"frozen": True, "extra": "forbid"}

    input_schema: list[str] = Field(..., description="Input column specs, e.g. 'id: long'")
    filter: FilterSettings
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, description="Records per output page")
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("input_schema")
    @classmethod
    def validate_input_schema(cls, v: list[str]) -> list[str]:
        # Surface malformed specs at load time rather than at first use
        try:
            Schema.from_specs(v)
        except SchemaConfigError as e:
            raise ValueError(str(e)) from e
        return v

    def build_input_schema(self) -> Schema:
        return Schema.from_specs(self.input_schema)


def load_settings(config_path: Path) -> ColsieveSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (COLSIEVE_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: COLSIEVE_LOGGING__LEVEL for nested keys,
    COLSIEVE_FILTER__OPTIONS__<OPTION> for plugin options.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="COLSIEVE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; drop its internal ones
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = _lowercase_keys({k: v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys})

    return ColsieveSettings(**_normalize_sections(raw_config))


def _lowercase_keys(mapping: Mapping[str, Any]) -> dict[str, Any]:
    # Later keys win, so an env override (uppercase) beats the file value
    return {str(k).lower(): v for k, v in mapping.items()}


def _normalize_sections(raw_config: dict[str, Any]) -> dict[str, Any]:
    """Lowercase the keys of nested settings sections.

    Nested env overrides (COLSIEVE_LOGGING__LEVEL,
    COLSIEVE_FILTER__OPTIONS__KEEP) arrive with uppercase keys. Only keys are
    touched: values such as column names stay case-sensitive.
    """
    logging_section = raw_config.get("logging")
    if isinstance(logging_section, Mapping):
        raw_config["logging"] = _lowercase_keys(logging_section)

    filter_section = raw_config.get("filter")
    if isinstance(filter_section, Mapping):
        filter_section = _lowercase_keys(filter_section)
        options = filter_section.get("options")
        if isinstance(options, Mapping):
            filter_section["options"] = _lowercase_keys(options)
        raw_config["filter"] = filter_section

    return raw_config
