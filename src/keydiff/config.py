from __future__ import annotations

import builtins
import importlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from keydiff.core.errors import ConfigFileError
from keydiff.core.registry import KeyProvider, KeyProviderRegistry, key_by_attribute, key_by_item

_BUILTIN_TYPE_NAMES = ("dict", "list", "tuple", "set", "frozenset", "str", "int", "float", "bool", "bytes")


@dataclass(slots=True)
class CompareConfig:
    key_providers: KeyProviderRegistry = field(default_factory=KeyProviderRegistry)
    source_path: Path | None = None


def _read_config_file(path: Path) -> dict[str, Any]:
    import yaml

    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigFileError(f"Invalid YAML in config file {path}: {exc}") from exc
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigFileError(f"Config file must be a mapping: {path}")
    return document


def layer_config(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Put ``overlay`` on top of ``base``.

    Nested tables such as ``key_providers`` are combined entry by entry;
    any other value in ``overlay`` replaces the one in ``base``.
    """
    layered = dict(base)
    for name, value in overlay.items():
        below = layered.get(name)
        if isinstance(below, dict) and isinstance(value, dict):
            layered[name] = layer_config(below, value)
        else:
            layered[name] = value
    return layered


def _read_config_chain(path: Path, seen: tuple[Path, ...] = ()) -> dict[str, Any]:
    """Read ``path`` and every file it ``extends``, nearest file on top."""
    path = path.resolve()
    if path in seen:
        chain = " -> ".join(str(item) for item in (*seen, path))
        raise ConfigFileError(f"Config extends cycle: {chain}")

    document = _read_config_file(path)
    parent_raw = document.pop("extends", None)
    if parent_raw is None:
        return document
    if not isinstance(parent_raw, str) or not parent_raw:
        raise ConfigFileError(f"`extends` must be a file path in {path}")

    parent = Path(parent_raw)
    if not parent.is_absolute():
        parent = path.parent / parent
    if not parent.exists():
        raise ConfigFileError(f"extends target not found: {parent}")
    return layer_config(_read_config_chain(parent, (*seen, path)), document)


def resolve_type(name: str) -> type:
    """Resolve a builtin type name (``dict``) or an import path (``pkg.module:Qualname``)."""
    if ":" not in name:
        if name in _BUILTIN_TYPE_NAMES:
            return getattr(builtins, name)
        raise ConfigFileError(
            f"Unknown type name '{name}'. Use one of {', '.join(_BUILTIN_TYPE_NAMES)} or 'module:Qualname'."
        )

    module_name, _, qualname = name.partition(":")
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigFileError(f"Cannot import module '{module_name}' for type '{name}'") from exc
    for part in qualname.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ConfigFileError(f"Module '{module_name}' has no attribute '{qualname}'") from exc
    if not isinstance(target, type):
        raise ConfigFileError(f"'{name}' does not name a type")
    return target


def _field_names(raw: Any, type_label: str) -> list[str]:
    names = [raw] if isinstance(raw, str) else raw
    if not isinstance(names, list) or not names or not all(isinstance(item, str) and item for item in names):
        raise ConfigFileError(f"Key fields for '{type_label}' must be a non-empty string or list of strings")
    return names


def build_provider(element_type: type, raw: Any, type_label: str) -> KeyProvider:
    """Provider for one config entry.

    ``raw`` is a field name, a list of field names, or ``{attribute: ...}`` /
    ``{item: ...}`` to pick the access style explicitly.  Without an explicit
    style mapping types are keyed by item and everything else by attribute.
    """
    if isinstance(raw, dict):
        if set(raw) == {"attribute"}:
            return key_by_attribute(*_field_names(raw["attribute"], type_label))
        if set(raw) == {"item"}:
            return key_by_item(*_field_names(raw["item"], type_label))
        raise ConfigFileError(f"Key provider for '{type_label}' must use exactly one of 'attribute' or 'item'")

    names = _field_names(raw, type_label)
    if issubclass(element_type, Mapping):
        return key_by_item(*names)
    return key_by_attribute(*names)


def parse_key_providers(raw: Any) -> KeyProviderRegistry:
    if raw is None:
        return KeyProviderRegistry()
    if not isinstance(raw, dict):
        raise ConfigFileError("`key_providers` must be a mapping of type name to key fields")
    registry = KeyProviderRegistry()
    for type_label in sorted(raw):
        element_type = resolve_type(str(type_label))
        registry.register(element_type, build_provider(element_type, raw[type_label], str(type_label)))
    return registry


def parse_key_option(option: str) -> tuple[type, KeyProvider]:
    """Parse a ``TYPE=FIELD[,FIELD...]`` command line option."""
    type_label, sep, fields_raw = option.partition("=")
    type_label = type_label.strip()
    if not sep or not type_label or not fields_raw.strip():
        raise ConfigFileError(f"Invalid key option '{option}'. Expected TYPE=FIELD[,FIELD...]")
    names = [name.strip() for name in fields_raw.split(",")]
    element_type = resolve_type(type_label)
    return element_type, build_provider(element_type, names, type_label)


def load_config(path: Path) -> CompareConfig:
    if not path.exists():
        raise ConfigFileError(f"Config file not found: {path}")
    data = _read_config_chain(path)
    unknown = sorted(set(data) - {"key_providers"})
    if unknown:
        raise ConfigFileError(f"Unknown config keys in {path}: {', '.join(unknown)}")
    return CompareConfig(
        key_providers=parse_key_providers(data.get("key_providers")),
        source_path=path.resolve(),
    )


__all__ = [
    "CompareConfig",
    "build_provider",
    "layer_config",
    "load_config",
    "parse_key_option",
    "parse_key_providers",
    "resolve_type",
]
