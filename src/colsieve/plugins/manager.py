# src/colsieve/plugins/manager.py
"""Plugin manager for discovery, registration, and instantiation.

Uses pluggy for hook-based plugin registration.
"""

from dataclasses import dataclass
from typing import Any

import pluggy

from colsieve.core.pages import BufferAllocator
from colsieve.plugins.base import BaseFilter
from colsieve.plugins.hookspecs import PROJECT_NAME, ColsieveFilterSpec, hookimpl


@dataclass(frozen=True)
class PluginSpec:
    """Registration record for a plugin.

    Frozen for immutability - plugin specs shouldn't change after creation.
    """

    name: str
    version: str
    description: str

    @classmethod
    def from_plugin(cls, plugin_cls: type[BaseFilter]) -> "PluginSpec":
        return cls(
            name=plugin_cls.name,
            version=plugin_cls.plugin_version,
            description=get_plugin_description(plugin_cls),
        )


def get_plugin_description(plugin_cls: type) -> str:
    """Return the first non-empty docstring line, or '<name> plugin'."""
    if plugin_cls.__doc__:
        for line in plugin_cls.__doc__.strip().split("\n"):
            cleaned = line.strip()
            if cleaned:
                return cleaned

    name = getattr(plugin_cls, "name", plugin_cls.__name__)
    return f"{name} plugin"


class _BuiltinFilters:
    """hookimpl provider for the filters shipped with colsieve."""

    @hookimpl
    def colsieve_get_filters(self) -> list[type[BaseFilter]]:
        from colsieve.plugins.filters.remove_columns import RemoveColumnsFilter

        return [RemoveColumnsFilter]


class PluginManager:
    """Manages plugin discovery, registration, and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_plugins()

        plugin = manager.create_filter("remove_columns")
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ColsieveFilterSpec)
        self._filters: dict[str, type[BaseFilter]] = {}

    def register_builtin_plugins(self) -> None:
        """Register the built-in filters. Call once at startup."""
        self.register(_BuiltinFilters())

    def register(self, plugin: Any) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance implementing hook methods
        """
        self._pm.register(plugin)
        self._refresh_caches()

    def _refresh_caches(self) -> None:
        """Rebuild the name -> class cache from all registered hooks.

        Raises:
            ValueError: If two plugins share a name
            TypeError: If a registered class is not a BaseFilter subclass
        """
        new_filters: dict[str, type[BaseFilter]] = {}
        for filters in self._pm.hook.colsieve_get_filters():
            for cls in filters:
                if not (isinstance(cls, type) and issubclass(cls, BaseFilter)):
                    raise TypeError(f"Filter plugin {cls!r} must subclass BaseFilter")
                name = cls.name
                if name in new_filters:
                    raise ValueError(f"Duplicate filter plugin name: '{name}'. Already registered by {new_filters[name].__name__}")
                new_filters[name] = cls

        self._filters = new_filters

    def get_filters(self) -> list[type[BaseFilter]]:
        """Get all registered filter plugins."""
        return list(self._filters.values())

    def get_filter_by_name(self, name: str) -> type[BaseFilter] | None:
        """Get filter plugin by name."""
        return self._filters.get(name)

    def get_plugin_specs(self) -> list[PluginSpec]:
        return [PluginSpec.from_plugin(cls) for cls in self._filters.values()]

    def create_filter(self, name: str, *, allocator: BufferAllocator | None = None) -> BaseFilter:
        """Instantiate a registered filter.

        Raises:
            ValueError: If no filter with that name is registered
        """
        plugin_cls = self._filters.get(name)
        if plugin_cls is None:
            available = sorted(self._filters)
            raise ValueError(f"Unknown filter plugin: '{name}'. Available: {available}")
        return plugin_cls(allocator=allocator)
