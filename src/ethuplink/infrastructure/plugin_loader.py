"""Resolve the settlement plugin factory named in the uplink config."""

from __future__ import annotations

import importlib

from ..domain.errors import ConfigurationError
from ..domain.shared import SettlementPluginFactory


def load_plugin_factory(path: str | None) -> SettlementPluginFactory:
    """Import `package.module:attribute` and return the attribute.

    The attribute is called with the `UplinkConfig` to build each plugin
    instance, so a plugin class taking the config works as-is.

    Raises:
        ConfigurationError: If no path is configured or it cannot be imported.
    """
    if not path:
        raise ConfigurationError(
            "No settlement plugin configured (set UPLINK_PLUGIN or re-run configure)"
        )
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigurationError(
            f"Plugin path must look like 'package.module:attribute', got {path!r}"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import plugin module {module_name!r}: {e}") from e
    try:
        factory = getattr(module, attribute)
    except AttributeError as e:
        raise ConfigurationError(
            f"Plugin module {module_name!r} has no attribute {attribute!r}"
        ) from e
    if not callable(factory):
        raise ConfigurationError(f"Plugin factory {path!r} is not callable")
    return factory
