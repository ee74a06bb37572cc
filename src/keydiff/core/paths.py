from __future__ import annotations

from collections.abc import Hashable


def field_path(path: str, name: str) -> str:
    return name if not path else f"{path}.{name}"


def key_path(path: str, key: Hashable) -> str:
    return f"{path}[{key}]"


__all__ = ["field_path", "key_path"]
