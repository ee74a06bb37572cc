from __future__ import annotations

from keydiff.plugins.loader import load_plugin_providers

__all__ = ["load_plugin_providers"]
