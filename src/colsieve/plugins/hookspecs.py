# src/colsieve/plugins/hookspecs.py
"""pluggy hook specifications for colsieve plugins.

Plugins implement these hooks to register themselves with the framework.

Usage (implementing a plugin):
    from colsieve.plugins.hookspecs import hookimpl

    class MyPlugin:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def colsieve_get_filters(self):
            return [MyFilter]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from colsieve.plugins.protocols import FilterProtocol

PROJECT_NAME = "colsieve"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ColsieveFilterSpec:
    """Hook specifications for filter plugins."""

    @hookspec
    def colsieve_get_filters(self) -> list[type["FilterProtocol"]]:  # type: ignore[empty-body]
        """Return filter plugin classes.

        Returns:
            List of Filter plugin classes (not instances)
        """
