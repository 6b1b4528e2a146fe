"""Built-in filter plugins.

Filters are accessed via PluginManager, not direct imports:
    manager = PluginManager()
    manager.register_builtin_plugins()
    plugin = manager.create_filter("remove_columns")
"""
