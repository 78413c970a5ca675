"""Registry of available build tool plugins.

This module provides functions to look up plugins by name. It is used by the
CLI to run a plugin against a manifest.

Note: Plugin registration should only occur during module import time.
The registry is not thread-safe for concurrent modifications.
"""

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from buildtoolsupport.plugin import BuildToolPlugin

_BUILTIN_MODULES = (
    "command_demo",
    "executable_file_demo",
    "local_target_demo",
    "script_demo",
    "toolchain_command_demo",
    "manifest",
)

# Lazy imports to avoid circular dependencies
_registry: dict[str, type["BuildToolPlugin"]] | None = None
_module_paths: dict[str, str] = {}


def get_plugins() -> dict[str, type["BuildToolPlugin"]]:
    """Return all registered plugins.

    This function initializes the registry on first call with built-in plugins,
    and returns the current registry on subsequent calls.

    Returns:
        Mapping of plugin names to plugin classes.
    """
    global _registry
    if _registry is None:
        _registry = {}
        for name in _BUILTIN_MODULES:
            module_path = f"buildtoolsupport.builtin.{name}"
            module = importlib.import_module(module_path)
            _registry[name] = module.Plugin
            _module_paths[name] = module_path

    return _registry


def get_module_paths() -> dict[str, str]:
    """Return mapping of plugin names to their module paths.

    This ensures the registry is initialized and returns a copy of the
    module paths dictionary.

    Returns:
        Dictionary mapping plugin names to their full module paths.
    """
    get_plugins()  # Ensure initialized
    return _module_paths.copy()


def get_plugin(name: str) -> type["BuildToolPlugin"]:
    """Return the plugin registered as ``name``.

    Raises:
        KeyError: If no plugin is registered under that name.
    """
    plugins = get_plugins()
    if name not in plugins:
        raise KeyError(f"Unknown plugin {name!r}; available: {sorted(plugins)}")
    return plugins[name]


def register_plugin(
    name: str,
    plugin_cls: type["BuildToolPlugin"],
    module_path: str,
) -> None:
    """Register a plugin.

    Note: This function should only be called during module import time.
    It is not thread-safe for concurrent modifications.

    Args:
        name: Plugin name (used in manifests and on the command line).
        plugin_cls: The plugin class.
        module_path: Full module path for the plugin (e.g., "mypackage.plugins.custom").
    """
    registry = get_plugins()
    registry[name] = plugin_cls
    _module_paths[name] = module_path
