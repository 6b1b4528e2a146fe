"""Plugin system: schema-changing page filters registered via pluggy.

- Protocols: Type contracts for plugin implementations
- Base classes: BaseFilter with allocator wiring
- Config: PluginConfig base with strict validation
- Manager / Hookspecs: Plugin discovery and registration
"""

from colsieve.plugins.base import BaseFilter
from colsieve.plugins.config_base import PluginConfig, PluginConfigError
from colsieve.plugins.hookspecs import hookimpl, hookspec
from colsieve.plugins.manager import PluginManager, PluginSpec
from colsieve.plugins.protocols import FilterControl, FilterProtocol

__all__ = [
    "BaseFilter",
    "FilterControl",
    "FilterProtocol",
    "PluginConfig",
    "PluginConfigError",
    "PluginManager",
    "PluginSpec",
    "hookimpl",
    "hookspec",
]
