from __future__ import annotations

from collections.abc import Mapping
from importlib.metadata import entry_points
from typing import Any

from keydiff.core.constants import KEY_PROVIDER_ENTRY_POINT_GROUP
from keydiff.core.errors import ConfigurationError
from keydiff.core.registry import KeyProviderRegistry


def _load_group(group: str) -> list[tuple[str, Any]]:
    loaded: list[tuple[str, Any]] = []
    for entry in entry_points().select(group=group):
        loaded.append((entry.name, entry.load()))
    return loaded


def load_plugin_providers(group: str = KEY_PROVIDER_ENTRY_POINT_GROUP) -> KeyProviderRegistry:
    """Collect key providers published by installed packages.

    An entry point resolves to a ``{type: provider}`` mapping, a
    :class:`KeyProviderRegistry`, or a zero-argument callable returning either.
    Later entry points win on conflicting types.
    """
    registry = KeyProviderRegistry()
    for name, plugin in _load_group(group):
        providers = plugin() if callable(plugin) else plugin
        if not isinstance(providers, (Mapping, KeyProviderRegistry)):
            raise ConfigurationError(
                f"Key provider plugin '{name}' must provide a mapping of type to key provider, "
                f"got {type(providers).__name__}"
            )
        registry = registry.merged(providers)
    return registry


__all__ = ["load_plugin_providers"]
